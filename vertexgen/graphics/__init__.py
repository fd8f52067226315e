from vertexgen.graphics.packing import pack_array, pack_vertices, record_dtype_of
from vertexgen.graphics.vertex_array import (
    VertexLayout,
    buffer_format,
    create_vertex_array,
    vao_content,
    vertex_layout,
)

__all__ = [
    "pack_array",
    "pack_vertices",
    "record_dtype_of",
    "VertexLayout",
    "buffer_format",
    "create_vertex_array",
    "vao_content",
    "vertex_layout",
]
