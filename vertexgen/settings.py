from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FormatSettings:
    """Policy applied when a record type is declared as a vertex format."""

    # Natural alignment; False packs the fields back to back.
    align: bool = True
    raise_on_error: bool = True
    register: bool = True


DEFAULT_SETTINGS = FormatSettings()
