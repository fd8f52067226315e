from __future__ import annotations

from typing import Iterable, Optional

from vertexgen.diagnostics import Reporter, SourceLocation
from vertexgen.types import Modifier


def resolve_modifier(
    keywords: Iterable[str],
    location: Optional[SourceLocation],
    reporter: Reporter,
) -> Optional[Modifier]:
    """
    Pick the interpretation modifier among a field's keywords.

    Keywords that are not modifiers are left alone. A second modifier warns
    and clears the selection, so a conflicting pair falls back to the plain
    reading of the field rather than to either of the two.
    """
    chosen: Optional[Modifier] = None

    for keyword in keywords:
        modifier = Modifier.from_keyword(keyword)
        if modifier is None:
            continue

        if chosen is None:
            chosen = modifier
            continue

        reporter.warn(
            location,
            f"Extra attribute modifier detected: `{modifier}` conflicts "
            f"with `{chosen}` - ignoring both.",
        )
        chosen = None

    return chosen
