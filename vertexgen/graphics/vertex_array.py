from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Collection, List, Optional, Sequence, Tuple

import moderngl

from vertexgen.types import POISON, Attribute, FloatType, IntMode, IntType

# moderngl vertex fetch supports these component sizes only.
_FLOAT_SIZES = (2, 4, 8)
_INT_SIZES = (1, 2, 4)


@dataclass(frozen=True, slots=True)
class VertexLayout:
    """Describes vertex attributes for VAO creation."""

    attributes: Sequence[str]  # e.g. ["pos", "normal", "uv"]
    format: str  # moderngl buffer format string e.g. "3f4 3f4 2f4"
    stride_bytes: int


def component_format(attribute: Attribute) -> str:
    """
    moderngl format code of one component, e.g. ``f4``, ``nu1`` or ``i2``.

    Raw and as_float integers share a code: the shader input's type decides
    whether the value arrives as an integer or is converted to float.
    """
    elem_type = attribute.elem_type
    if attribute.is_poisoned:
        raise ValueError(f"Attribute '{attribute.name}' has no valid type")

    size = elem_type.width // 8

    if isinstance(elem_type, FloatType):
        if size not in _FLOAT_SIZES:
            raise ValueError(f"Unsupported float width for '{attribute.name}'")
        return f"f{size}"

    if isinstance(elem_type, IntType):
        if size not in _INT_SIZES:
            raise ValueError(
                f"Unsupported integer width {elem_type.width} for "
                f"'{attribute.name}'"
            )
        kind = "i" if elem_type.signed else "u"
        if elem_type.mode is IntMode.NORMALIZED:
            return f"n{kind}{size}"
        return f"{kind}{size}"

    raise TypeError(f"Unknown attribute type: {elem_type!r}")


def attribute_size(attribute: Attribute) -> int:
    """Bytes occupied by one attribute inside a record."""
    if attribute.elem_count is POISON or attribute.elem_type is POISON:
        raise ValueError(f"Attribute '{attribute.name}' has no valid size")
    return attribute.elem_count * (attribute.elem_type.width // 8)


def _check_shared(attributes: Sequence[Attribute]) -> Tuple[Any, int]:
    if not attributes:
        raise ValueError("No attributes to describe")

    first = attributes[0]
    for attr in attributes[1:]:
        if attr.stride != first.stride:
            raise ValueError("Attributes have different strides")
        if attr.buffer is not first.buffer:
            raise ValueError("Attributes read from different buffers")
    return first.buffer, first.stride


def _layout(
    attributes: Sequence[Attribute],
    names: Optional[Collection[str]],
    per_instance: bool,
) -> Tuple[str, List[str]]:
    _, stride = _check_shared(attributes)

    parts: List[str] = []
    used: List[str] = []
    cursor = 0

    for attr in sorted(attributes, key=lambda a: a.offset):
        # Skipped attributes become part of the next gap.
        if names is not None and attr.name not in names:
            continue

        if attr.offset < cursor:
            raise ValueError(f"Attribute '{attr.name}' overlaps its predecessor")

        size = attribute_size(attr)
        if size == 0:
            continue

        if attr.offset > cursor:
            parts.append(f"{attr.offset - cursor}x")

        code = component_format(attr)
        count = "" if attr.elem_count == 1 else str(attr.elem_count)
        parts.append(f"{count}{code}")
        used.append(attr.name)

        cursor = attr.offset + size

    if stride > cursor:
        parts.append(f"{stride - cursor}x")
    elif stride < cursor:
        raise ValueError(f"Attributes span {cursor} bytes, stride is {stride}")

    if per_instance:
        parts.append("/i")

    return " ".join(parts), used


def buffer_format(
    attributes: Sequence[Attribute],
    names: Optional[Collection[str]] = None,
    *,
    per_instance: bool = False,
) -> str:
    """
    moderngl buffer format for one record, with padding for alignment gaps,
    trailing bytes and attributes left out of ``names``.
    """
    fmt, _ = _layout(attributes, names, per_instance)
    return fmt


def vertex_layout(attributes: Sequence[Attribute]) -> VertexLayout:
    fmt, used = _layout(attributes, None, False)
    return VertexLayout(
        attributes=used,
        format=fmt,
        stride_bytes=attributes[0].stride,
    )


def vao_content(
    attributes: Sequence[Attribute],
    program_attributes: Optional[Collection[str]] = None,
    *,
    per_instance: bool = False,
) -> Tuple[Any, ...]:
    """
    A ``ctx.vertex_array`` content entry for the attributes.

    Attributes the program does not consume are skipped over as padding.
    """
    buffer, _ = _check_shared(attributes)
    fmt, used = _layout(attributes, program_attributes, per_instance)

    if not used:
        raise RuntimeError("No compatible vertex attributes for this program")

    return (buffer, fmt, *used)


def program_attribute_names(program: moderngl.Program) -> List[str]:
    names = []
    for name in program:
        member = program[name]
        if isinstance(member, moderngl.Attribute):
            names.append(name)
    return names


def create_vertex_array(
    ctx: moderngl.Context,
    program: moderngl.Program,
    attributes: Sequence[Attribute],
    *,
    index_buffer: Optional[moderngl.Buffer] = None,
    instance_attributes: Optional[Sequence[Attribute]] = None,
) -> moderngl.VertexArray:
    """
    Create a VAO reading the attributes from their buffer.

    ``instance_attributes`` are read once per instance from their own buffer.
    """
    names = program_attribute_names(program)
    if not names:
        raise RuntimeError("Program has no vertex attributes")

    content = [vao_content(attributes, names)]
    if instance_attributes:
        content.append(vao_content(instance_attributes, names, per_instance=True))

    return ctx.vertex_array(program, content, index_buffer=index_buffer)
