from __future__ import annotations
import logging
from enum import Enum
from typing import Optional, Tuple, Type, TypeVar

from .codecs.scalars import Scalar, width_of
from .errors import error_for
from datareader.models.failure import DecodeFailure, FailureKind

_logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)
_Result = Tuple[object, Optional[DecodeFailure]]


class CursorReader:
    """
    Sequential reader over an immutable byte buffer.

    ``peek_*`` decodes at the current position without moving it; ``read_*``
    decodes the same value and then advances by the requested width. Failures
    never abort: by default they return ``None`` and are recorded in
    ``last_failure``; with ``strict=True`` they raise ``InsufficientData`` or
    ``InvalidEncoding`` instead.

    A failed ``read_*`` still advances by the assumed width (clamped to the
    end of the buffer), so a short read leaves the reader at end. Pass
    ``advance_on_failure=False`` to keep the position on failure and retry.
    """
    __slots__ = ("_buf", "_pos", "strict", "advance_on_failure", "last_failure")

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        *,
        strict: bool = False,
        advance_on_failure: bool = True,
    ):
        view = memoryview(data)
        if not view.readonly:
            # writable sources are snapshotted; the buffer is immutable from here on
            view = memoryview(view.tobytes())
        if view.ndim != 1 or view.format != "B":
            view = view.cast("B")
        self._buf = view.toreadonly()
        self._pos = 0
        self.strict = strict
        self.advance_on_failure = advance_on_failure
        self.last_failure: DecodeFailure | None = None

    # ---- position ----
    @property
    def buffer(self) -> memoryview:
        return self._buf

    @property
    def position(self) -> int:
        return self._pos

    def tell(self) -> int: return self._pos
    def remaining(self) -> int: return max(len(self._buf) - self._pos, 0)
    def is_at_end(self) -> bool: return self._pos >= len(self._buf)
    def __len__(self) -> int: return len(self._buf)

    def __repr__(self) -> str:
        return f"CursorReader(position={self._pos}, length={len(self._buf)})"

    # ---- scalars and Decodable types ----
    def peek_scalar(self, t):
        return self._settle(*self._decode(t))

    def read_scalar(self, t):
        result = self._decode(t)
        self._consume(width_of(t), result[1])
        return self._settle(*result)

    # ---- arrays ----
    def peek_array(self, t, count: int) -> list | None:
        return self._settle(*self._decode_array(t, count))

    def read_array(self, t, count: int) -> list | None:
        result = self._decode_array(t, count)
        self._consume(count * width_of(t), result[1])
        return self._settle(*result)

    # ---- UTF-8 text ----
    def peek_text(self, byte_count: int) -> str | None:
        return self._settle(*self._decode_text(byte_count))

    def read_text(self, byte_count: int) -> str | None:
        result = self._decode_text(byte_count)
        self._consume(byte_count, result[1])
        return self._settle(*result)

    # ---- tagged values ----
    def peek_tagged(self, enum_type: Type[E], raw_type: Scalar) -> E | None:
        return self._settle(*self._decode_tagged(enum_type, raw_type))

    def read_tagged(self, enum_type: Type[E], raw_type: Scalar) -> E | None:
        result = self._decode_tagged(enum_type, raw_type)
        self._consume(raw_type.width, result[1])
        return self._settle(*result)

    # ---- raw bytes ----
    def peek_bytes(self, n: int) -> bytes | None:
        return self._settle(*self._decode_bytes(n))

    def read_bytes(self, n: int) -> bytes | None:
        result = self._decode_bytes(n)
        self._consume(n, result[1])
        return self._settle(*result)

    # ---- internals: every _decode_* is side-effect free ----
    def _failure(self, kind: FailureKind, width: int, detail: str | None = None) -> DecodeFailure:
        return DecodeFailure(kind=kind, offset=self._pos, width=width,
                             available=self.remaining(), detail=detail)

    def _span(self, width: int) -> Tuple[Optional[memoryview], Optional[DecodeFailure]]:
        if width < 0:
            raise ValueError(f"negative width {width}")
        end = self._pos + width
        if end > len(self._buf):
            return None, self._failure(FailureKind.INSUFFICIENT_DATA, width)
        return self._buf[self._pos:end], None

    def _decode(self, t) -> _Result:
        w = width_of(t)
        raw, failure = self._span(w)
        if failure is not None:
            return None, failure
        return self._decode_span(t, raw)

    def _decode_span(self, t, raw: memoryview) -> _Result:
        if isinstance(t, Scalar):
            return t.unpack(raw), None
        sub = CursorReader(raw, strict=True)
        name = getattr(t, "__name__", repr(t))
        try:
            value = t.decode(sub)
        except ValueError as e:
            return None, self._failure(FailureKind.INVALID_ENCODING, len(raw), detail=f"{name}: {e}")
        if sub.position != len(raw):
            return None, self._failure(
                FailureKind.INVALID_ENCODING, len(raw),
                detail=f"{name} consumed {sub.position} of {len(raw)} bytes",
            )
        return value, None

    def _decode_array(self, t, count: int) -> _Result:
        if count < 0:
            raise ValueError(f"negative count {count}")
        w = width_of(t)
        raw, failure = self._span(count * w)
        if failure is not None:
            return None, failure
        if isinstance(t, Scalar):
            return t.unpack_many(raw, count), None
        out = []
        for i in range(count):
            value, failure = self._decode_span(t, raw[i * w:(i + 1) * w])
            if failure is not None:
                return None, failure.model_copy(update={"width": count * w})
            out.append(value)
        return out, None

    def _decode_text(self, byte_count: int) -> _Result:
        raw, failure = self._span(byte_count)
        if failure is not None:
            return None, failure
        try:
            return bytes(raw).decode("utf-8"), None
        except UnicodeDecodeError as e:
            return None, self._failure(
                FailureKind.INVALID_ENCODING, byte_count,
                detail=f"invalid UTF-8 at byte {e.start}: {e.reason}",
            )

    def _decode_tagged(self, enum_type: Type[E], raw_type: Scalar) -> _Result:
        if not isinstance(raw_type, Scalar):
            raise TypeError(f"tagged raw type must be a Scalar, got {raw_type!r}")
        raw, failure = self._decode(raw_type)
        if failure is not None:
            return None, failure
        try:
            return enum_type(raw), None
        except ValueError:
            return None, self._failure(
                FailureKind.INVALID_ENCODING, raw_type.width,
                detail=f"{raw!r} is not a valid {enum_type.__name__}",
            )

    def _decode_bytes(self, n: int) -> _Result:
        raw, failure = self._span(n)
        if failure is not None:
            return None, failure
        return raw.tobytes(), None

    def _consume(self, width: int, failure: DecodeFailure | None) -> None:
        if failure is None or self.advance_on_failure:
            self._pos = min(self._pos + width, len(self._buf))

    def _settle(self, value, failure: DecodeFailure | None):
        self.last_failure = failure
        if failure is None:
            return value
        _logger.debug("decode failed: %s", failure.describe())
        if self.strict:
            raise error_for(failure)
        return None
