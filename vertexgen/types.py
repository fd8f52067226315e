from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Final, List, Optional, TypeAlias, Union

import numpy as np


class Modifier(str, Enum):
    """
    Per-field directive that changes how a stored component is read by the
    vertex fetch stage without changing its storage layout.
    """

    # Unsigned integers are normalized to [0, 1], signed integers to [-1, 1].
    NORMALIZED = "normalized"
    # Cast to a single precision float at fetch time.
    AS_FLOAT = "as_float"
    # Cast to a double precision float at fetch time.
    AS_DOUBLE = "as_double"

    @classmethod
    def from_keyword(cls, keyword: str) -> Optional[Modifier]:
        return _KEYWORD_TO_MODIFIER.get(keyword)

    def __str__(self) -> str:
        return self.value


_KEYWORD_TO_MODIFIER: Final[Dict[str, Modifier]] = {m.value: m for m in Modifier}


class TypeFamily(str, Enum):
    FLOAT = "float"
    INT = "int"


@dataclass(frozen=True, slots=True)
class ScalarType:
    """A recognized primitive component type."""

    name: str
    family: TypeFamily
    width: int  # bits
    signed: bool
    dtype: np.dtype


def _scalar(name: str, family: TypeFamily, dtype: Any) -> ScalarType:
    dt = np.dtype(dtype)
    return ScalarType(
        name=name,
        family=family,
        width=dt.itemsize * 8,
        signed=not name.startswith("u"),
        dtype=dt,
    )


# uint/int follow the platform pointer width.
SCALAR_TYPES: Final[Dict[str, ScalarType]] = {
    s.name: s
    for s in (
        _scalar("f32", TypeFamily.FLOAT, np.float32),
        _scalar("f64", TypeFamily.FLOAT, np.float64),
        _scalar("u8", TypeFamily.INT, np.uint8),
        _scalar("u16", TypeFamily.INT, np.uint16),
        _scalar("u32", TypeFamily.INT, np.uint32),
        _scalar("u64", TypeFamily.INT, np.uint64),
        _scalar("uint", TypeFamily.INT, np.uintp),
        _scalar("i8", TypeFamily.INT, np.int8),
        _scalar("i16", TypeFamily.INT, np.int16),
        _scalar("i32", TypeFamily.INT, np.int32),
        _scalar("i64", TypeFamily.INT, np.int64),
        _scalar("int", TypeFamily.INT, np.intp),
    )
}


class FloatPrecision(str, Enum):
    DEFAULT = "default"
    PRECISE = "precise"


class IntMode(str, Enum):
    RAW = "raw"
    NORMALIZED = "normalized"
    AS_FLOAT = "as_float"


@dataclass(frozen=True, slots=True)
class FloatType:
    precision: FloatPrecision
    width: int


@dataclass(frozen=True, slots=True)
class IntType:
    mode: IntMode
    width: int
    signed: bool


class Poison:
    """
    Marker substituted for a count or type whose derivation failed.
    There is exactly one instance, POISON.
    """

    _instance: Optional[Poison] = None

    def __new__(cls) -> Poison:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "POISON"

    def __reduce__(self) -> str:
        return "POISON"


POISON: Final[Poison] = Poison()

AttributeType: TypeAlias = Union[FloatType, IntType, Poison]
ElementCount: TypeAlias = Union[int, Poison]


@dataclass(frozen=True, slots=True)
class Attribute:
    """How one field of a record is fetched from a vertex buffer."""

    buffer: Any  # opaque, passed through unchanged
    elem_count: ElementCount
    elem_type: AttributeType
    offset: int  # bytes from the start of the record
    stride: int  # bytes between consecutive records
    name: str

    @property
    def is_poisoned(self) -> bool:
        return self.elem_count is POISON or self.elem_type is POISON


@dataclass(frozen=True, slots=True)
class Derivation:
    """Result of deriving the attributes of one record."""

    attributes: List[Attribute]
    success: bool

    def __iter__(self):
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)
