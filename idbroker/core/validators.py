"""Input validation helpers for configuration values."""
from __future__ import annotations
from typing import Any, List, Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(raw: Any, default: bool) -> bool:
    """Interpret a config value as a boolean.

    Args:
        raw: Real boolean, string spelling ("true", "no", ...) or None
        default: Value used when raw is None or empty

    Returns:
        Parsed boolean

    Raises:
        ValueError: If a string value is not a recognized spelling
    """
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        return raw
    normalized = str(raw).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Expected a boolean value, got {raw!r}")


def parse_timeout(raw: Any, default: float) -> float:
    """Validate a request timeout in seconds.

    Raises:
        ValueError: If the value is not a positive number
    """
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        raise ValueError(f"Timeout must be a number of seconds, got {raw!r}")
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Timeout must be a number of seconds, got {raw!r}") from None
    if timeout <= 0:
        raise ValueError("Timeout must be greater than zero")
    return timeout


def parse_csv(raw: Optional[str]) -> List[str]:
    """Split a comma-separated string into trimmed, non-empty entries."""
    if not raw:
        return []
    return [entry.strip() for entry in raw.split(",") if entry.strip()]
