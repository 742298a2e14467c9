import sys

import pytest

from datareader.binary.cursor import CursorReader
from datareader.binary.codecs.scalars import U8, S8, U16, S16, U32, S32, U64, S64, F32, F64, BOOL, width_of
from datareader.models.failure import FailureKind

little_endian = pytest.mark.skipif(sys.byteorder != "little", reason="byte literals assume little-endian host")


def peek(t, data):
    return CursorReader(bytes(data)).peek_scalar(t)


def test_widths():
    assert [width_of(t) for t in (U8, S8, U16, S16, U32, S32, U64, S64, F32, F64, BOOL)] == [1, 1, 2, 2, 4, 4, 8, 8, 4, 8, 1]


@little_endian
def test_peeking():
    assert peek(U8, [1, 0, 0, 0]) == 1
    assert peek(U16, [1, 0, 0, 0]) == 1
    assert peek(U32, [1, 0, 0, 0]) == 1
    assert peek(U16, [1, 2, 0, 0]) == 513
    assert peek(U32, [1, 2, 3, 0]) == 197121
    assert peek(U32, [1, 2, 3, 4]) == 67305985


def test_all_ones():
    data = [255] * 8
    assert peek(U64, data) == 18446744073709551615
    assert peek(S64, data) == -1
    assert peek(U8, data) == 255
    assert peek(S8, data) == -1
    assert peek(U16, data) == 65535
    assert peek(S16, data) == -1
    assert peek(U32, data) == 4294967295
    assert peek(S32, data) == -1


@pytest.mark.parametrize("t,v", [(U16, 0xBEEF), (S16, -12345), (U32, 3_000_000_000), (S32, -2), (U64, 2**63 + 5), (S64, -(2**40))])
def test_native_round_trip(t, v):
    raw = v.to_bytes(t.width, sys.byteorder, signed=t.name.startswith("s"))
    assert peek(t, raw) == v


def test_floats_bit_for_bit():
    import struct
    assert peek(F64, struct.pack("=d", 1.5)) == 1.5
    assert peek(F32, struct.pack("=f", -0.25)) == -0.25


def test_peek_is_idempotent():
    r = CursorReader(bytes([7, 8, 9, 10]))
    assert r.peek_scalar(U16) == r.peek_scalar(U16)
    assert r.position == 0


def test_read_matches_peek_then_advance():
    r = CursorReader(bytes([1, 2, 3, 4, 5, 6]))
    expected = r.peek_scalar(U32)
    assert r.read_scalar(U32) == expected
    assert r.position == 4
    assert r.remaining() == 2


def test_reading_sequentially():
    r = CursorReader(bytes([1, 2, 3, 4]))
    assert [r.read_scalar(U8) for _ in range(4)] == [1, 2, 3, 4]
    assert r.is_at_end()


def test_underrun_peek():
    r = CursorReader(bytes([1, 2, 3]))
    assert r.peek_scalar(S32) is None
    assert r.last_failure.kind is FailureKind.INSUFFICIENT_DATA
    assert r.last_failure.width == 4 and r.last_failure.available == 3
    assert r.position == 0


def test_success_clears_last_failure():
    r = CursorReader(bytes([1, 2, 3]))
    r.peek_scalar(U32)
    assert r.last_failure is not None
    assert r.peek_scalar(U8) == 1
    assert r.last_failure is None


def test_is_at_end():
    assert CursorReader(b"").is_at_end()
    assert not CursorReader(bytes([1, 2])).is_at_end()


def test_exact_consumption_reaches_end():
    r = CursorReader(bytes(15))
    r.read_scalar(U64)
    r.read_scalar(U32)
    r.read_scalar(U16)
    assert not r.is_at_end()
    r.read_scalar(U8)
    assert r.is_at_end()


def test_writable_source_is_snapshotted():
    src = bytearray([5, 0])
    r = CursorReader(src)
    src[0] = 9
    assert r.peek_scalar(U8) == 5
    assert r.buffer.readonly
