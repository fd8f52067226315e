from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Sequence

import numpy as np

from vertexgen.types import SCALAR_TYPES

if TYPE_CHECKING:
    from vertexgen.core.schema import RecordSchema


def _entry_dtype(declared: Any) -> np.dtype:
    if isinstance(declared, str) and declared in ("int", "uint"):
        return SCALAR_TYPES[declared].dtype
    return np.dtype(declared)


def record_dtype(entries: Sequence[Sequence[Any]], *, align: bool = True) -> np.dtype:
    """
    Lay out declaration entries ``(name, type)`` / ``(name, type, shape)``.

    With ``align`` the fields are placed in order at their natural alignment
    and the record is padded to a multiple of its largest alignment, the same
    placement a C compiler applies to the equivalent struct. Without it the
    fields are packed.
    """
    spec = []
    for entry in entries:
        if len(entry) not in (2, 3):
            raise TypeError(f"Invalid field declaration: {entry!r}")

        name, declared = entry[0], entry[1]
        if len(entry) == 3:
            spec.append((name, _entry_dtype(declared), entry[2]))
        else:
            spec.append((name, _entry_dtype(declared)))

    return np.dtype(spec, align=align)


def offset_of(schema: RecordSchema, field_name: str) -> int:
    """Byte offset of a field inside one record."""
    try:
        return int(schema.dtype.fields[field_name][1])
    except KeyError:
        raise KeyError(f"Record '{schema.name}' has no field '{field_name}'")


def stride_of(schema: RecordSchema) -> int:
    """Byte size of one record, i.e. the distance between consecutive records."""
    return int(schema.dtype.itemsize)


def field_offsets(schema: RecordSchema) -> Dict[str, int]:
    return {f.name: offset_of(schema, f.name) for f in schema.fields}
