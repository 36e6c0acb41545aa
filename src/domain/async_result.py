"""Tagged result for values loaded asynchronously.

``Pending`` while the load runs, ``Ready`` with the data, ``Failed`` with the
raised exception. Consumers branch on the variant with ``match``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")

__all__ = ["Pending", "Ready", "Failed", "AsyncResult"]


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class Ready(Generic[T]):
    data: T


@dataclass(frozen=True)
class Failed:
    error: BaseException


AsyncResult = Union[Pending, Ready[T], Failed]
