from __future__ import annotations

from typing import Dict, Optional, Tuple

from vertexgen.core.modifiers import resolve_modifier
from vertexgen.core.schema import FieldSpec, FixedArray, Scalar
from vertexgen.diagnostics import Reporter, SourceLocation
from vertexgen.types import (
    POISON,
    SCALAR_TYPES,
    AttributeType,
    ElementCount,
    FloatPrecision,
    FloatType,
    IntMode,
    IntType,
    Modifier,
    ScalarType,
    TypeFamily,
)

_FLOAT_PRECISION: Dict[Optional[Modifier], FloatPrecision] = {
    None: FloatPrecision.DEFAULT,
    Modifier.AS_FLOAT: FloatPrecision.DEFAULT,
    Modifier.AS_DOUBLE: FloatPrecision.PRECISE,
}

_INT_MODE: Dict[Optional[Modifier], IntMode] = {
    None: IntMode.RAW,
    Modifier.NORMALIZED: IntMode.NORMALIZED,
    Modifier.AS_FLOAT: IntMode.AS_FLOAT,
}


def classify(
    type_name: str,
    modifier: Optional[Modifier],
    location: Optional[SourceLocation],
    reporter: Reporter,
) -> AttributeType:
    """Find the attribute type describing a scalar component."""
    scalar = SCALAR_TYPES.get(type_name)
    if scalar is None:
        reporter.error(location, f"Unrecognized component type: `{type_name}`")
        return POISON

    if scalar.family is TypeFamily.FLOAT:
        return _classify_float(scalar, modifier, location, reporter)
    return _classify_int(scalar, modifier, location, reporter)


def _classify_float(
    scalar: ScalarType,
    modifier: Optional[Modifier],
    location: Optional[SourceLocation],
    reporter: Reporter,
) -> AttributeType:
    precision = _FLOAT_PRECISION.get(modifier)
    if precision is None:
        reporter.error(
            location,
            f"Incompatible float modifier attribute: `{modifier}` "
            f"on `{scalar.name}`",
        )
        return POISON
    return FloatType(precision, scalar.width)


def _classify_int(
    scalar: ScalarType,
    modifier: Optional[Modifier],
    location: Optional[SourceLocation],
    reporter: Reporter,
) -> AttributeType:
    mode = _INT_MODE.get(modifier)
    if mode is None:
        reporter.error(
            location,
            f"Incompatible int modifier attribute: `{modifier}` "
            f"on `{scalar.name}`",
        )
        return POISON
    return IntType(mode, scalar.width, scalar.signed)


def _is_length(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def decode_count_and_type(
    field: FieldSpec, reporter: Reporter
) -> Tuple[ElementCount, AttributeType]:
    """Element count and attribute type of one field."""
    modifier = resolve_modifier(field.modifiers, field.location, reporter)
    shape = field.shape

    if isinstance(shape, Scalar):
        return 1, classify(shape.type_name, modifier, field.location, reporter)

    if (
        isinstance(shape, FixedArray)
        and isinstance(shape.element, Scalar)
        and _is_length(shape.length)
    ):
        elem_type = classify(
            shape.element.type_name, modifier, field.location, reporter
        )
        return shape.length, elem_type

    reporter.error(field.location, f"Unsupported attribute type: `{shape}`")
    return POISON, POISON
