from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Type, TypeVar, overload

from vertexgen.core.derive import derive_attributes
from vertexgen.core.registry import VertexFormatRegistry
from vertexgen.core.schema import as_record_schema
from vertexgen.diagnostics import DiagnosticCollector, DiagnosticSink
from vertexgen.errors import VertexFormatError
from vertexgen.settings import DEFAULT_SETTINGS, FormatSettings
from vertexgen.types import Attribute

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


def _generate(
    cls: Type[Any], buffer: Any, sink: Optional[DiagnosticSink] = None
) -> List[Attribute]:
    """Attributes reading this record type out of ``buffer``."""
    schema = cls.__vertex_schema__
    record = schema if schema is not None else cls
    return derive_attributes(record, buffer, sink).attributes


@overload
def vertex_format(cls: T) -> T: ...
@overload
def vertex_format(
    cls: None = None, *, settings: FormatSettings = ...
) -> Callable[[T], T]: ...


def vertex_format(cls: Any = None, *, settings: FormatSettings = DEFAULT_SETTINGS):
    """
    Class decorator declaring a record type as a vertex format.

    The class lists its fields in ``__soa_dtype__`` and may attach modifier
    keywords to them through ``__vertex_modifiers__``::

        @vertex_format
        class ColoredVertex:
            __soa_dtype__ = [("pos", "f4", (3,)), ("color", "u1", (4,))]
            __vertex_modifiers__ = {"color": ("normalized",)}

    The whole record is checked once, here. Warnings are logged; errors are
    logged and, unless the settings say otherwise, raised together as a
    VertexFormatError. The class gains ``__vertex_schema__``,
    ``__vertex_dtype__`` and a ``generate(buffer)`` classmethod.
    """

    def decorator(record_type: T) -> T:
        collector = DiagnosticCollector()
        schema = as_record_schema(record_type, align=settings.align)
        derivation = derive_attributes(
            schema if schema is not None else record_type, None, collector
        )

        for diagnostic in collector.warnings:
            logger.warning("%s", diagnostic)

        if not derivation.success:
            for diagnostic in collector.errors:
                logger.error("%s", diagnostic)
            if settings.raise_on_error:
                raise VertexFormatError(
                    record_type.__qualname__, collector.diagnostics
                )

        record_type.__vertex_schema__ = schema
        record_type.__vertex_dtype__ = schema.dtype if schema is not None else None
        record_type.generate = classmethod(_generate)

        if settings.register and schema is not None:
            VertexFormatRegistry.register(record_type, schema)

        logger.debug(
            "Declared vertex format %s: %d attribute(s), stride %s",
            record_type.__qualname__,
            len(derivation),
            schema.dtype.itemsize if schema is not None else "n/a",
        )
        return record_type

    if cls is None:
        return decorator
    return decorator(cls)
