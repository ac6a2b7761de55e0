"""Named field configurations."""

from __future__ import annotations

from robowars.core.geometry import Size
from robowars.core.models import FieldConfiguration

HUGE = FieldConfiguration.create(40, 40, 10, (Size(6, 8), Size(8, 6)), name="huge")
TALL = FieldConfiguration.create(30, 30, 30, (Size(1, 8), Size(8, 1)), name="tall")
FAT = FieldConfiguration.create(30, 30, 2, (Size(10, 10),), name="fat")
NORMAL = FieldConfiguration.create(20, 20, 12, (Size(3, 2), Size(2, 3)), name="normal")
WEIRD = FieldConfiguration.create(20, 20, 1, (Size(3, 5), Size(5, 3)), name="weird")

# Rules of the single-duel client before tournaments existed.
CLASSIC = FieldConfiguration.create(20, 20, 6, (Size(2, 3), Size(3, 2)), name="classic")

PRESETS: dict[str, FieldConfiguration] = {
    preset.name: preset for preset in (HUGE, TALL, FAT, NORMAL, WEIRD, CLASSIC)
}


def preset_names() -> list[str]:
    return list(PRESETS)


def get_preset(name: str) -> FieldConfiguration:
    """Return a preset by name; raises KeyError for unknown names."""
    key = name.strip().lower()
    try:
        return PRESETS[key]
    except KeyError:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(PRESETS)}.") from None
