from __future__ import annotations
import struct
from dataclasses import dataclass, field

# "=" selects native byte order with standard sizes and no alignment, so a
# descriptor's width never depends on the host compiler's struct padding.
_NATIVE = "="


@dataclass(frozen=True)
class Scalar:
    """Fixed-width value decoded bit-for-bit in native byte order."""
    name: str
    fmt: str
    _struct: struct.Struct = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_struct", struct.Struct(_NATIVE + self.fmt))

    @property
    def width(self) -> int:
        return self._struct.size

    def unpack(self, raw: bytes | memoryview) -> object:
        return self._struct.unpack(raw)[0]

    def unpack_many(self, raw: bytes | memoryview, count: int) -> list:
        return list(struct.unpack(f"{_NATIVE}{count}{self.fmt}", raw))


U8 = Scalar("u8", "B")
S8 = Scalar("s8", "b")
U16 = Scalar("u16", "H")
S16 = Scalar("s16", "h")
U32 = Scalar("u32", "I")
S32 = Scalar("s32", "i")
U64 = Scalar("u64", "Q")
S64 = Scalar("s64", "q")
F32 = Scalar("f32", "f")
F64 = Scalar("f64", "d")
BOOL = Scalar("bool", "?")

SCALARS: dict[str, Scalar] = {s.name: s for s in (U8, S8, U16, S16, U32, S32, U64, S64, F32, F64, BOOL)}


def width_of(t) -> int:
    """Byte width of a scalar descriptor or a Decodable type."""
    if isinstance(t, Scalar):
        return t.width
    byte_width = getattr(t, "byte_width", None)
    if byte_width is None:
        raise TypeError(f"{t!r} is neither a Scalar nor a Decodable type")
    return int(byte_width())
