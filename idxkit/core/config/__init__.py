"""
Configuration Package Initialization.

Flat public API for the configuration schemas using lazy imports (PEP 562),
so the registry layer can import ``types`` without pulling in the manifest.

Example:
    >>> from idxkit.core.config import Config
    >>> cfg = Config.from_recipe(Path("recipe.yaml"))
"""

from importlib import import_module
from typing import Any

__all__ = [
    "Config",
    "AcquisitionConfig",
    "BatchingConfig",
]

_PKG = "idxkit.core.config"

_LAZY_IMPORTS: dict[str, str] = {
    "Config": f"{_PKG}.manifest",
    "AcquisitionConfig": f"{_PKG}.acquisition_config",
    "BatchingConfig": f"{_PKG}.batching_config",
}


def __getattr__(name: str) -> Any:
    """Loads a configuration class on first access and caches it."""
    if name not in _LAZY_IMPORTS:
        raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
    module = import_module(_LAZY_IMPORTS[name])
    value = getattr(module, name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + __all__)
