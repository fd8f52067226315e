import inspect

import numpy as np
import pytest

from vertexgen.core.schema import (
    FieldSpec,
    FixedArray,
    NestedRecord,
    ObjectRef,
    RecordSchema,
    Scalar,
    as_record_schema,
    schema_from_class,
    schema_from_dtype,
    shape_from_dtype,
)


class ColoredVertex:
    __soa_dtype__ = [
        ("pos", "f4", (3,)),
        ("color", "u1", (4,)),
        ("layer", "i2"),
    ]
    __vertex_modifiers__ = {"color": ("normalized",)}


class IndexedVertex:
    __soa_dtype__ = [("index", "uint"), ("neighbours", "int", (2,))]


@pytest.mark.parametrize(
    "declared, expected",
    [
        ("f4", Scalar("f32")),
        ("f8", Scalar("f64")),
        ("u1", Scalar("u8")),
        ("i8", Scalar("i64")),
        ("f2", Scalar("f16")),
        ("?", Scalar("bool")),
        (("f4", (3,)), FixedArray(Scalar("f32"), 3)),
        (("u2", (3, 2)), FixedArray(FixedArray(Scalar("u16"), 2), 3)),
        ("O", ObjectRef()),
    ],
)
def test_shape_from_dtype(declared, expected):
    assert shape_from_dtype(np.dtype(declared)) == expected


def test_nested_struct_shape():
    shape = shape_from_dtype(np.dtype([("x", "f4"), ("y", "f4")]))

    assert isinstance(shape, NestedRecord)
    assert str(shape).startswith("struct ")


def test_schema_from_class():
    schema = schema_from_class(ColoredVertex)

    assert schema.name == "ColoredVertex"
    assert [f.name for f in schema.fields] == ["pos", "color", "layer"]
    assert schema.fields[0].shape == FixedArray(Scalar("f32"), 3)
    assert schema.fields[1].modifiers == ("normalized",)
    assert schema.fields[2].modifiers == ()
    assert schema.dtype.itemsize == 20


def test_schema_from_class_locations():
    schema = schema_from_class(ColoredVertex)

    assert schema.location.file.endswith("test_schema.py")
    lines = [f.location.line for f in schema.fields]
    assert lines == sorted(lines)
    assert len(set(lines)) == 3
    assert schema.fields[1].location.field == "color"


def test_native_width_names_survive():
    schema = schema_from_class(IndexedVertex)

    assert schema.fields[0].shape == Scalar("uint")
    assert schema.fields[1].shape == FixedArray(Scalar("int"), 2)


def test_schema_from_dtype_with_modifiers():
    dtype = np.dtype([("normal", "i1", (3,))], align=True)
    schema = schema_from_dtype(dtype, name="Packed", modifiers={"normal": ["normalized"]})

    assert schema.name == "Packed"
    assert schema.fields[0].modifiers == ("normalized",)
    assert schema.fields[0].location.field == "normal"


def test_modifiers_for_unknown_field():
    dtype = np.dtype([("pos", "f4", (3,))])

    with pytest.raises(KeyError, match="unknown fields"):
        schema_from_dtype(dtype, modifiers={"color": ["normalized"]})


def test_record_schema_rejects_mismatched_layout():
    dtype = np.dtype([("a", "f4"), ("b", "f4")])

    with pytest.raises(ValueError, match="do not match"):
        RecordSchema("Broken", (FieldSpec("b", Scalar("f32")),), dtype)


class NotARecord:
    pass


class EmptyRecord:
    __soa_dtype__ = []


@pytest.mark.parametrize(
    "record", [np.dtype("f4"), NotARecord, EmptyRecord, 42, "pos"]
)
def test_non_records(record):
    assert as_record_schema(record) is None


def test_as_record_schema_passes_schemas_through():
    schema = schema_from_class(ColoredVertex)

    assert as_record_schema(schema) is schema


def test_empty_schema_is_not_a_record():
    assert as_record_schema(RecordSchema("Empty", (), np.dtype([]))) is None


def test_single_keyword_modifier():
    dtype = np.dtype([("normal", "i1", (3,))])
    schema = schema_from_dtype(dtype, modifiers={"normal": "normalized"})

    assert schema.fields[0].modifiers == ("normalized",)


class DocumentedVertex:
    """Vertex whose "pos" is in world space and whose 'color' is sRGB."""

    __vertex_modifiers__ = {"color": "normalized"}
    __soa_dtype__ = [
        ("pos", "f4", (3,)),
        ("color", "u1", (4,)),
    ]


def test_field_lines_come_from_the_declaration():
    lines, start = inspect.getsourcelines(DocumentedVertex)
    entries = {
        name: start + i
        for i, text in enumerate(lines)
        for name in ("pos", "color")
        if f'("{name}"' in text
    }

    schema = schema_from_class(DocumentedVertex)

    assert {f.name: f.location.line for f in schema.fields} == entries
    assert schema.fields[1].modifiers == ("normalized",)
