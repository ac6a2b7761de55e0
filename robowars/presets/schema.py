"""Field configuration payloads for user supplied rules."""

from __future__ import annotations

from robowars.core.geometry import Rect, Size
from robowars.core.models import FieldConfiguration, sorted_sizes

SCHEMA_VERSION = 1


def configuration_to_payload(config: FieldConfiguration) -> dict[str, object]:
    """Convert a configuration to a JSON-serializable payload."""
    rect = config.field_rect
    return {
        "version": SCHEMA_VERSION,
        "name": config.name,
        "field": [rect.x, rect.y, rect.width, rect.height],
        "ship_count": config.ship_count,
        "ship_sizes": [
            [size.width, size.height] for size in sorted_sizes(config.allowed_ship_sizes)
        ],
    }


def payload_to_configuration(payload: dict[str, object]) -> FieldConfiguration:
    """Parse and sanity-check a configuration payload."""
    raw_version = payload.get("version", SCHEMA_VERSION)
    if not isinstance(raw_version, (int, str)):
        raise ValueError("Configuration version must be int-compatible.")
    if int(raw_version) != SCHEMA_VERSION:
        raise ValueError("Unsupported configuration version.")

    name = str(payload.get("name", "custom")).strip() or "custom"
    field_rect = _parse_field(payload.get("field"))

    raw_count = payload.get("ship_count")
    if not isinstance(raw_count, (int, str)):
        raise ValueError("ship_count must be int-compatible.")
    try:
        ship_count = int(raw_count)
    except ValueError as exc:
        raise ValueError("ship_count must be int-compatible.") from exc
    if ship_count < 1:
        raise ValueError("ship_count must be >= 1.")

    raw_sizes = payload.get("ship_sizes")
    if not isinstance(raw_sizes, list) or not raw_sizes:
        raise ValueError("ship_sizes must be a non-empty list.")
    sizes: set[Size] = set()
    for item in raw_sizes:
        width, height = _parse_pair(item, "ship size")
        if width < 1 or height < 1:
            raise ValueError("Ship sizes must be positive.")
        sizes.add(Size(width, height))

    return FieldConfiguration(
        field_rect=field_rect,
        ship_count=ship_count,
        allowed_ship_sizes=frozenset(sizes),
        name=name,
    )


def _parse_field(raw: object) -> Rect:
    if isinstance(raw, list) and len(raw) == 2:
        width, height = _parse_pair(raw, "field")
        x, y = 0, 0
    elif isinstance(raw, list) and len(raw) == 4:
        try:
            x, y, width, height = (int(value) for value in raw)
        except (TypeError, ValueError) as exc:
            raise ValueError("Malformed field entry in configuration payload.") from exc
    else:
        raise ValueError("field must be [width, height] or [x, y, width, height].")
    if width < 1 or height < 1:
        raise ValueError("Field dimensions must be positive.")
    return Rect(x, y, width, height)


def _parse_pair(raw: object, label: str) -> tuple[int, int]:
    if not isinstance(raw, list) or len(raw) != 2:
        raise ValueError(f"Each {label} must be a 2-item list.")
    try:
        return int(raw[0]), int(raw[1])
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Malformed {label} entry in configuration payload.") from exc
