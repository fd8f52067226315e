from __future__ import annotations

from typing import Any, List, Optional

from vertexgen.core.classify import decode_count_and_type
from vertexgen.core.layout import offset_of, stride_of
from vertexgen.core.schema import (
    ModifierMap,
    RecordSchema,
    as_record_schema,
    source_location,
)
from vertexgen.diagnostics import DiagnosticSink, LoggingSink, Reporter
from vertexgen.types import Attribute, Derivation


def assemble(schema: RecordSchema, buffer: Any, reporter: Reporter) -> Derivation:
    """Build one attribute per field, in declaration order."""
    stride = stride_of(schema)
    attributes: List[Attribute] = []

    for field in schema.fields:
        # A broken field is poisoned, never fatal, so that every problem of
        # the record is reported by a single call.
        elem_count, elem_type = decode_count_and_type(field, reporter)
        attributes.append(
            Attribute(
                buffer=buffer,
                elem_count=elem_count,
                elem_type=elem_type,
                offset=offset_of(schema, field.name),
                stride=stride,
                name=field.name,
            )
        )

    return Derivation(attributes=attributes, success=not reporter.failed)


def derive_attributes(
    record: Any,
    buffer: Any = None,
    sink: Optional[DiagnosticSink] = None,
    *,
    modifiers: Optional[ModifierMap] = None,
    align: bool = True,
) -> Derivation:
    """
    Derive the vertex attributes of a record.

    Args:
        record: A RecordSchema, a structured numpy dtype or a class
            declaring ``__soa_dtype__``.
        buffer: Opaque buffer handle copied into every attribute.
        sink: Receives warnings and errors. Diagnostics are logged when
            no sink is given.
        modifiers: Modifier keywords per field, for dtype records.
        align: Layout strategy for class declarations.

    Returns:
        The attributes and whether derivation finished without errors.
    """
    reporter = Reporter(sink if sink is not None else LoggingSink())

    schema = as_record_schema(record, modifiers=modifiers, align=align)
    if schema is None:
        if isinstance(record, RecordSchema):
            name, location = record.name, record.location
        else:
            name = getattr(record, "__qualname__", None) or repr(record)
            location = source_location(record)
        reporter.error(
            location,
            f"Unable to derive a vertex format for non-record type `{name}`",
        )
        return Derivation(attributes=[], success=False)

    return assemble(schema, buffer, reporter)
