"""Feature modules with auto-discovery.

Each module is a package under ``zatch.modules``. A module exposes HTTP
endpoints through ``router`` in its ``routes`` submodule and database tables
through its ``models`` submodule.
"""

from importlib import import_module
from importlib.util import find_spec
from pathlib import Path

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def _module_names() -> list[str]:
    modules_dir = Path(__file__).parent
    return [
        path.name
        for path in sorted(modules_dir.iterdir())
        if path.is_dir() and not path.name.startswith("_")
    ]


def _has_submodule(name: str, submodule: str) -> bool:
    return find_spec(f"{__name__}.{name}.{submodule}") is not None


def discover_modules() -> list[APIRouter]:
    """Auto-discover and return routers from all modules.

    Returns:
        List of FastAPI routers from discovered modules.
    """
    routers: list[APIRouter] = []

    for name in _module_names():
        if not _has_submodule(name, "routes"):
            continue
        module = import_module(f"{__name__}.{name}.routes")
        router = getattr(module, "router", None)
        if router is not None:
            routers.append(router)
            logger.debug("module_loaded", module=name)

    return routers


def load_models() -> None:
    """Import every module's models so their tables join ``Base.metadata``."""
    import_module("zatch.core.permissions.models")
    for name in _module_names():
        if _has_submodule(name, "models"):
            import_module(f"{__name__}.{name}.models")
