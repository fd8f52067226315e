from __future__ import annotations

from typing import List, Sequence

from vertexgen.diagnostics import Diagnostic, Severity


class VertexFormatError(Exception):
    """A record type could not be turned into a vertex format."""

    def __init__(self, record: str, diagnostics: Sequence[Diagnostic]) -> None:
        self.record = record
        self.diagnostics: List[Diagnostic] = list(diagnostics)

        errors = [d for d in self.diagnostics if d.severity is Severity.ERROR]
        details = "\n".join(f"  {d}" for d in errors)
        super().__init__(
            f"Cannot derive vertex format for '{record}' "
            f"({len(errors)} error(s)):\n{details}"
        )
