from typing import Any, Dict, List, Type

from vertexgen.core.schema import RecordSchema


class VertexFormatRegistry:
    _formats: Dict[Type[Any], RecordSchema] = {}

    @classmethod
    def register(cls, record_type: Type[Any], schema: RecordSchema) -> None:
        existing = cls._formats.get(record_type)
        if existing is not None and existing != schema:
            raise KeyError(
                f"Vertex format '{record_type.__qualname__}' already registered"
            )
        cls._formats[record_type] = schema

    @classmethod
    def get(cls, record_type: Type[Any]) -> RecordSchema:
        try:
            return cls._formats[record_type]
        except KeyError:
            raise KeyError(
                f"Vertex format '{record_type.__qualname__}' not found"
            )

    @classmethod
    def is_registered(cls, record_type: Type[Any]) -> bool:
        return record_type in cls._formats

    @classmethod
    def registered(cls) -> List[Type[Any]]:
        """Registered record types in registration order."""
        return list(cls._formats)

    @classmethod
    def unregister(cls, record_type: Type[Any]) -> None:
        cls._formats.pop(record_type, None)

    @classmethod
    def clear(cls) -> None:
        cls._formats.clear()
