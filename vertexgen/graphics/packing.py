from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, Tuple

import numpy as np

from vertexgen.core.schema import as_record_schema


def record_dtype_of(record: Any) -> np.dtype:
    """The applied layout of a vertex format class, schema or dtype."""
    schema = as_record_schema(record)
    if schema is None:
        raise TypeError(f"{record!r} is not a record type")
    return schema.dtype


def _row_values(row: Any, names: Sequence[str]) -> Tuple[Any, ...]:
    if isinstance(row, tuple):
        return row

    if isinstance(row, Mapping):
        return tuple(row[name] for name in names)

    values = []
    for name in names:
        val = getattr(row, name)
        if hasattr(val, "__iter__") and not isinstance(
            val, (str, bytes, list, tuple, np.ndarray)
        ):
            val = tuple(val)
        values.append(val)
    return tuple(values)


def pack_array(record: Any, rows: Iterable[Any]) -> np.ndarray:
    """
    Fill a structured array with the given vertices.

    Rows may be tuples in field order, mappings keyed by field name or
    objects exposing the fields as attributes.
    """
    dtype = record_dtype_of(record)
    rows = list(rows)

    out = np.zeros(len(rows), dtype=dtype)
    for i, row in enumerate(rows):
        out[i] = _row_values(row, dtype.names)
    return out


def pack_vertices(record: Any, rows: Iterable[Any]) -> bytes:
    """Vertex buffer contents matching the derived attribute offsets."""
    return pack_array(record, rows).tobytes()
