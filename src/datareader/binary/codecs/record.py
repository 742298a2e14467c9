from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Protocol, Tuple, Type, runtime_checkable

from pydantic import BaseModel

from .scalars import Scalar, width_of

if TYPE_CHECKING:
    from ..cursor import CursorReader


@runtime_checkable
class Decodable(Protocol):
    """A composite type that knows its byte width and how to read its fields in order."""

    @classmethod
    def byte_width(cls) -> int: ...

    @classmethod
    def decode(cls, reader: "CursorReader") -> Any: ...


# Field plan entries. Each reads itself through the reader's consuming
# primitives; the reader handed to Record.decode is strict, so a failed
# field raises rather than returning None.

@dataclass(frozen=True)
class ScalarField:
    name: str
    type: Any  # Scalar or Decodable

    @property
    def width(self) -> int: return width_of(self.type)
    def read(self, reader: "CursorReader") -> object: return reader.read_scalar(self.type)


@dataclass(frozen=True)
class ArrayField:
    name: str
    type: Any
    count: int

    @property
    def width(self) -> int: return self.count * width_of(self.type)
    def read(self, reader: "CursorReader") -> object: return reader.read_array(self.type, self.count)


@dataclass(frozen=True)
class TextField:
    name: str
    byte_count: int

    @property
    def width(self) -> int: return self.byte_count
    def read(self, reader: "CursorReader") -> object: return reader.read_text(self.byte_count)


@dataclass(frozen=True)
class TaggedField:
    name: str
    enum: Type[Enum]
    raw: Scalar

    @property
    def width(self) -> int: return self.raw.width
    def read(self, reader: "CursorReader") -> object: return reader.read_tagged(self.enum, self.raw)


FieldSpec = ScalarField | ArrayField | TextField | TaggedField


class Record(BaseModel):
    """
    Base for composite values with an explicit on-wire field plan.

    Subclasses declare ``__layout__`` listing every field in byte order. The
    record's width is the sum of its field widths (no padding), and decoding
    reads each field in that order before handing the values to pydantic
    for validation:

        class Point(Record):
            __layout__ = (ScalarField("x", S32), ScalarField("y", S32))
            x: int
            y: int
    """
    __layout__: ClassVar[Tuple[FieldSpec, ...]] = ()

    @classmethod
    def byte_width(cls) -> int:
        return sum(f.width for f in cls.__layout__)

    @classmethod
    def decode(cls, reader: "CursorReader") -> "Record":
        values: Dict[str, object] = {}
        for f in cls.__layout__:
            values[f.name] = f.read(reader)
        return cls(**values)
