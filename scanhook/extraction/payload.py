from typing import Any


def dig(payload: Any, *path: str) -> Any:
    """Walk `path` through nested mappings, returning None on any miss."""
    current = payload
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
