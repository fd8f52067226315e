from vertexgen.core.classify import classify, decode_count_and_type
from vertexgen.core.derive import assemble, derive_attributes
from vertexgen.core.layout import field_offsets, offset_of, record_dtype, stride_of
from vertexgen.core.modifiers import resolve_modifier
from vertexgen.core.registry import VertexFormatRegistry
from vertexgen.core.schema import (
    FieldShape,
    FieldSpec,
    FixedArray,
    NestedRecord,
    ObjectRef,
    RecordSchema,
    Scalar,
    as_record_schema,
    schema_from_class,
    schema_from_dtype,
)
from vertexgen.core.vertex_format import vertex_format

__all__ = [
    "classify",
    "decode_count_and_type",
    "assemble",
    "derive_attributes",
    "field_offsets",
    "offset_of",
    "record_dtype",
    "stride_of",
    "resolve_modifier",
    "VertexFormatRegistry",
    "FieldShape",
    "FieldSpec",
    "FixedArray",
    "NestedRecord",
    "ObjectRef",
    "RecordSchema",
    "Scalar",
    "as_record_schema",
    "schema_from_class",
    "schema_from_dtype",
    "vertex_format",
]
