"""Backend discovery via Python entry points."""

from importlib.metadata import entry_points
from typing import Any

from recordsql.protocols import Database

BACKEND_GROUPS = {
    "database": "recordsql.backends.database",
}


def discover_backends(group: str) -> dict[str, Any]:
    """Discover all registered backends for a given group.

    Args:
        group: The backend group name (database)

    Returns:
        Dictionary mapping backend names to their (unloaded) entry points
    """
    full_group = BACKEND_GROUPS.get(group, group)
    eps = entry_points(group=full_group)
    return {ep.name: ep for ep in eps}


def get_backend(group: str, name: str) -> Any:
    """Get a specific backend class by group and name.

    Only the requested backend is imported, so a missing driver for another
    backend does not matter.

    Args:
        group: The backend group name (database)
        name: The backend name (e.g., "mysql", "sqlite")

    Returns:
        The backend class

    Raises:
        ValueError: If the backend is not found
    """
    backends = discover_backends(group)
    if name not in backends:
        available = ", ".join(sorted(backends.keys())) or "(none)"
        raise ValueError(
            f"Backend '{name}' not found in group '{group}'. Available: {available}"
        )
    return backends[name].load()


def create_database(backend: str, **kwargs: Any) -> Database:
    """Create a Database instance.

    Args:
        backend: The backend name (e.g., "mysql", "sqlite")
        **kwargs: Backend-specific configuration

    Returns:
        A Database implementation
    """
    cls = get_backend("database", backend)
    return cls(**kwargs)
