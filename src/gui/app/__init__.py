"""Application layer: startup bootstrap and its timing instrumentation."""

from .bootstrap import (  # noqa: F401
    AppDependencies,
    AppDependenciesProvider,
    BootstrapError,
    app_dependencies,
    bootstrap_dependencies,
)
from .timing import TimingLogger  # noqa: F401

__all__ = [
    "AppDependencies",
    "AppDependenciesProvider",
    "BootstrapError",
    "app_dependencies",
    "bootstrap_dependencies",
    "TimingLogger",
]
