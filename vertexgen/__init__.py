from vertexgen.core import (
    FieldSpec,
    FixedArray,
    NestedRecord,
    ObjectRef,
    RecordSchema,
    Scalar,
    VertexFormatRegistry,
    derive_attributes,
    vertex_format,
)
from vertexgen.diagnostics import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticSink,
    LoggingSink,
    Severity,
    SourceLocation,
)
from vertexgen.errors import VertexFormatError
from vertexgen.settings import DEFAULT_SETTINGS, FormatSettings
from vertexgen.types import (
    POISON,
    Attribute,
    Derivation,
    FloatPrecision,
    FloatType,
    IntMode,
    IntType,
    Modifier,
)

__all__ = [
    "FieldSpec",
    "FixedArray",
    "NestedRecord",
    "ObjectRef",
    "RecordSchema",
    "Scalar",
    "VertexFormatRegistry",
    "derive_attributes",
    "vertex_format",
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticSink",
    "LoggingSink",
    "Severity",
    "SourceLocation",
    "VertexFormatError",
    "DEFAULT_SETTINGS",
    "FormatSettings",
    "POISON",
    "Attribute",
    "Derivation",
    "FloatPrecision",
    "FloatType",
    "IntMode",
    "IntType",
    "Modifier",
]
