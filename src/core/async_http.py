"""Async HTTP utilities using httpx."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from config import settings
from domain.auth import AuthSessionState, LightUser, sign_bearer_token

from .platform_info import DeviceInfo, PackageInfo


class AsyncHttpError(RuntimeError):
    pass


def make_user_agent(
    package_info: PackageInfo,
    device_info: DeviceInfo,
    sri: str,
    user: Optional[LightUser],
) -> str:
    return (
        f"{package_info.app_name}/{package_info.version} "
        f"as:{user.id if user is not None else 'anon'} "
        f"sri:{sri} "
        f"os:{device_info.system}/{device_info.release} "
        f"dev:{device_info.model}"
    )


def auth_headers(session: AuthSessionState, user_agent: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {sign_bearer_token(session.token)}",
        "User-Agent": user_agent,
    }


def create_client(
    *,
    user_agent: Optional[str] = None,
    timeout: float | None = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    headers = {"User-Agent": user_agent} if user_agent else None
    return httpx.AsyncClient(
        base_url=settings.HOST,
        headers=headers,
        timeout=timeout if timeout is not None else settings.DEFAULT_TIMEOUT,
        transport=transport,
    )


async def fetch_json(
    client: httpx.AsyncClient,
    path: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float | None = None,
) -> Any:
    """GET ``path`` and decode the JSON body; any failure becomes ``AsyncHttpError``."""
    try:
        resp = await client.get(
            path,
            headers=headers,
            timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
        )
        resp.raise_for_status()
        return resp.json()
    except (httpx.TimeoutException, httpx.HTTPError) as e:
        raise AsyncHttpError(f"GET {path} failed: {e}") from e
    except ValueError as e:
        raise AsyncHttpError(f"GET {path} returned invalid JSON: {e}") from e
