import numpy as np
import pytest

from vertexgen.core.classify import classify, decode_count_and_type
from vertexgen.core.schema import FieldSpec, FixedArray, NestedRecord, ObjectRef, Scalar
from vertexgen.diagnostics import Severity
from vertexgen.types import (
    POISON,
    FloatPrecision,
    FloatType,
    IntMode,
    IntType,
    Modifier,
)


@pytest.mark.parametrize(
    "type_name, modifier, expected",
    [
        ("f32", None, FloatType(FloatPrecision.DEFAULT, 32)),
        ("f32", Modifier.AS_FLOAT, FloatType(FloatPrecision.DEFAULT, 32)),
        ("f32", Modifier.AS_DOUBLE, FloatType(FloatPrecision.PRECISE, 32)),
        ("f64", None, FloatType(FloatPrecision.DEFAULT, 64)),
        ("u8", None, IntType(IntMode.RAW, 8, False)),
        ("i16", Modifier.NORMALIZED, IntType(IntMode.NORMALIZED, 16, True)),
        ("u32", Modifier.AS_FLOAT, IntType(IntMode.AS_FLOAT, 32, False)),
        ("i64", None, IntType(IntMode.RAW, 64, True)),
    ],
)
def test_classify_valid(reporter, collector, type_name, modifier, expected):
    assert classify(type_name, modifier, None, reporter) == expected
    assert len(collector) == 0


def test_native_width_types(reporter):
    native = np.dtype(np.uintp).itemsize * 8

    assert classify("uint", None, None, reporter) == IntType(
        IntMode.RAW, native, False
    )
    assert classify("int", None, None, reporter) == IntType(IntMode.RAW, native, True)


def test_normalized_float_is_poisoned(reporter, collector):
    assert classify("f32", Modifier.NORMALIZED, None, reporter) is POISON

    assert len(collector) == 1
    assert collector.diagnostics[0].severity is Severity.ERROR
    assert "Incompatible float modifier" in collector.diagnostics[0].message


def test_double_int_is_poisoned(reporter, collector):
    assert classify("i32", Modifier.AS_DOUBLE, None, reporter) is POISON

    assert len(collector.errors) == 1
    assert "Incompatible int modifier" in collector.errors[0].message


def test_unrecognized_type(reporter, collector):
    assert classify("f16", None, None, reporter) is POISON

    assert len(collector.errors) == 1
    assert "Unrecognized component type: `f16`" in collector.errors[0].message


def test_decode_scalar(reporter):
    field = FieldSpec("weight", Scalar("f32"))

    assert decode_count_and_type(field, reporter) == (
        1,
        FloatType(FloatPrecision.DEFAULT, 32),
    )


def test_decode_fixed_array_with_modifier(reporter, collector):
    field = FieldSpec("pos", FixedArray(Scalar("f32"), 3), ("as_float",))

    count, elem_type = decode_count_and_type(field, reporter)

    assert count == 3
    assert elem_type == FloatType(FloatPrecision.DEFAULT, 32)
    assert len(collector) == 0


def test_decode_array_of_arrays_is_unsupported(reporter, collector):
    field = FieldSpec("matrix", FixedArray(FixedArray(Scalar("f32"), 4), 4))

    assert decode_count_and_type(field, reporter) == (POISON, POISON)
    assert len(collector.errors) == 1
    assert "Unsupported attribute type: `f32[4][4]`" in collector.errors[0].message


@pytest.mark.parametrize(
    "shape",
    [
        NestedRecord("[('x', '<f4')]"),
        ObjectRef(),
        FixedArray(Scalar("f32"), -1),
    ],
)
def test_decode_unsupported_shapes(reporter, collector, shape):
    field = FieldSpec("bad", shape)

    assert decode_count_and_type(field, reporter) == (POISON, POISON)
    assert len(collector.errors) == 1
    assert "Unsupported attribute type" in collector.errors[0].message


def test_decode_reports_conflict_before_shape_error(reporter, collector):
    field = FieldSpec("bad", ObjectRef(), ("normalized", "as_double"))

    decode_count_and_type(field, reporter)

    assert [d.severity for d in collector.diagnostics] == [
        Severity.WARNING,
        Severity.ERROR,
    ]


def test_decode_conflict_classifies_as_plain(reporter, collector):
    field = FieldSpec("color", FixedArray(Scalar("u8"), 4), ("normalized", "as_float"))

    count, elem_type = decode_count_and_type(field, reporter)

    assert count == 4
    assert elem_type == IntType(IntMode.RAW, 8, False)
    assert len(collector.warnings) == 1
    assert not collector.has_errors
