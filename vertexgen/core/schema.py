from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeAlias,
    Union,
)

import numpy as np

from vertexgen.core.layout import record_dtype
from vertexgen.diagnostics import SourceLocation

ModifierMap: TypeAlias = Mapping[str, Union[str, Sequence[str]]]


@dataclass(frozen=True, slots=True)
class Scalar:
    type_name: str

    def __str__(self) -> str:
        return self.type_name


@dataclass(frozen=True, slots=True)
class FixedArray:
    element: FieldShape
    length: int

    def __str__(self) -> str:
        return f"{self.element}[{self.length}]"


@dataclass(frozen=True, slots=True)
class NestedRecord:
    description: str

    def __str__(self) -> str:
        return f"struct {self.description}"


@dataclass(frozen=True, slots=True)
class ObjectRef:
    description: str = "object"

    def __str__(self) -> str:
        return self.description


FieldShape: TypeAlias = Union[Scalar, FixedArray, NestedRecord, ObjectRef]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One declared field of a record."""

    name: str
    shape: FieldShape
    modifiers: Tuple[str, ...] = ()
    location: Optional[SourceLocation] = None


@dataclass(frozen=True, slots=True)
class RecordSchema:
    """
    Named fields of a record in declaration order, together with the numpy
    dtype that holds the record's applied memory layout.
    """

    name: str
    fields: Tuple[FieldSpec, ...]
    dtype: np.dtype
    location: Optional[SourceLocation] = None

    def __post_init__(self) -> None:
        if self.dtype.names is None:
            raise TypeError(f"Record '{self.name}' needs a structured dtype")

        declared = tuple(f.name for f in self.fields)
        if declared != self.dtype.names:
            raise ValueError(
                f"Record '{self.name}' fields {declared} do not match "
                f"its layout {self.dtype.names}"
            )

    def __len__(self) -> int:
        return len(self.fields)


def scalar_name(dt: np.dtype) -> str:
    """Name a numpy scalar dtype the way component types are spelled."""
    if dt.kind in ("f", "i", "u"):
        return f"{dt.kind}{dt.itemsize * 8}"
    if dt.kind == "b":
        return "bool"
    if dt.kind == "c":
        return f"c{dt.itemsize * 8}"
    return dt.name


def shape_from_dtype(dt: np.dtype) -> FieldShape:
    if dt.subdtype is not None:
        base, dims = dt.subdtype
        element = (
            shape_from_dtype(np.dtype((base, dims[1:])))
            if len(dims) > 1
            else shape_from_dtype(base)
        )
        return FixedArray(element, int(dims[0]))

    if dt.names is not None:
        return NestedRecord(str(dt))

    if dt.kind == "O":
        return ObjectRef()

    return Scalar(scalar_name(dt))


def _rename_scalar(shape: FieldShape, type_name: str) -> FieldShape:
    if isinstance(shape, Scalar):
        return Scalar(type_name)
    if isinstance(shape, FixedArray):
        return FixedArray(_rename_scalar(shape.element, type_name), shape.length)
    return shape


def source_location(obj: Any) -> Optional[SourceLocation]:
    """Best-effort declaration site of a class, None when unavailable."""
    if not inspect.isclass(obj):
        return None

    try:
        file = inspect.getsourcefile(obj)
        _, line = inspect.getsourcelines(obj)
    except (OSError, TypeError):
        return SourceLocation(record=obj.__qualname__)

    return SourceLocation(file=file, line=line, record=obj.__qualname__)


def _declaration_lines(lines: Sequence[str]) -> range:
    """Indices of the lines spanned by the ``__soa_dtype__`` assignment."""
    for first, text in enumerate(lines):
        head, sep, _ = text.partition("=")
        if sep and "__soa_dtype__" in head:
            break
    else:
        return range(0)

    depth = 0
    for last in range(first, len(lines)):
        text = lines[last] if last > first else lines[first].partition("=")[2]
        depth += sum(text.count(c) for c in "([{")
        depth -= sum(text.count(c) for c in ")]}")
        if depth <= 0:
            break
    return range(first, last + 1)


def _field_lines(obj: Any, names: Sequence[str]) -> Dict[str, int]:
    """Line of the first ``__soa_dtype__`` entry quoting each field name."""
    try:
        lines, start = inspect.getsourcelines(obj)
    except (OSError, TypeError):
        return {}

    found: Dict[str, int] = {}
    for offset in _declaration_lines(lines):
        text = lines[offset]
        for name in names:
            if name in found:
                continue
            if f'"{name}"' in text or f"'{name}'" in text:
                found[name] = start + offset
    return found


def _keywords(value: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    # A lone keyword is one modifier, not a sequence of characters.
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def schema_from_dtype(
    dtype: np.dtype,
    *,
    name: Optional[str] = None,
    modifiers: Optional[ModifierMap] = None,
    location: Optional[SourceLocation] = None,
) -> RecordSchema:
    modifiers = modifiers or {}
    unknown = set(modifiers) - set(dtype.names or ())
    if unknown:
        raise KeyError(f"Modifiers given for unknown fields: {sorted(unknown)}")

    record_name = name or (location.record if location else None) or str(dtype)
    base = location or SourceLocation(record=record_name)

    fields = tuple(
        FieldSpec(
            name=field_name,
            shape=shape_from_dtype(dtype.fields[field_name][0]),
            modifiers=_keywords(modifiers.get(field_name, ())),
            location=base.for_field(field_name),
        )
        for field_name in dtype.names
    )
    return RecordSchema(record_name, fields, dtype, base)


def schema_from_class(record_type: type, *, align: bool = True) -> RecordSchema:
    """
    Build the schema of a class declaring its fields in ``__soa_dtype__`` and
    optional modifier keywords in ``__vertex_modifiers__``.
    """
    entries = list(record_type.__soa_dtype__)
    modifiers: ModifierMap = getattr(record_type, "__vertex_modifiers__", {})

    dtype = record_dtype(entries, align=align)
    location = source_location(record_type)
    schema = schema_from_dtype(
        dtype, name=record_type.__qualname__, modifiers=modifiers, location=location
    )

    lines = _field_lines(record_type, dtype.names)
    fields = []
    for entry, spec in zip(entries, schema.fields):
        shape = spec.shape
        declared = entry[1]
        # Native-width spellings survive the trip through numpy.
        if isinstance(declared, str) and declared in ("int", "uint"):
            shape = _rename_scalar(shape, declared)

        field_location = spec.location
        if location is not None and spec.name in lines:
            field_location = SourceLocation(
                file=location.file,
                line=lines[spec.name],
                record=location.record,
                field=spec.name,
            )

        fields.append(
            FieldSpec(spec.name, shape, spec.modifiers, field_location)
        )

    return RecordSchema(schema.name, tuple(fields), dtype, location)


def as_record_schema(
    record: Any,
    *,
    modifiers: Optional[ModifierMap] = None,
    align: bool = True,
) -> Optional[RecordSchema]:
    """
    Normalise a record declaration to a RecordSchema.

    Accepts a non-empty RecordSchema, a structured numpy dtype or a class
    with a non-empty ``__soa_dtype__``. Returns None for anything that is
    not a record with named fields. ``modifiers`` only applies to dtypes and
    ``align`` only to undecorated classes.
    """
    if isinstance(record, RecordSchema):
        return record if record.fields else None

    if isinstance(record, np.dtype):
        if not record.names:
            return None
        return schema_from_dtype(record, modifiers=modifiers)

    if not inspect.isclass(record):
        return None

    # Declared through @vertex_format, with the layout chosen there.
    declared = vars(record).get("__vertex_schema__")
    if isinstance(declared, RecordSchema):
        return as_record_schema(declared)

    if getattr(record, "__soa_dtype__", None):
        return schema_from_class(record, align=align)

    return None
