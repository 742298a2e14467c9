from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel

from .cursor import CursorReader
from .codecs.record import FieldSpec
from .errors import DecodeError
from datareader.models.failure import DecodeFailure
from datareader.models.value import DecodedValue

BytesLike = Union[str, Path, bytes, bytearray, memoryview]

_logger = logging.getLogger(__name__)


def load_bytes(inp: BytesLike) -> bytes:
    if isinstance(inp, (bytes, bytearray, memoryview)):
        return bytes(inp)
    p = Path(str(inp))
    data = p.read_bytes()
    _logger.debug("loaded %d bytes from %s", len(data), p)
    return data


def open_reader(inp: BytesLike, **options) -> CursorReader:
    """Build a CursorReader over a path or an in-memory buffer."""
    return CursorReader(load_bytes(inp), **options)


def _plain(value):
    """Reduce decoded values to JSON-friendly primitives."""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def decode_layout(
    data: Union[BytesLike, CursorReader],
    specs: Iterable[FieldSpec],
    *,
    stop_on_failure: bool = True,
) -> Tuple[List[DecodedValue], Optional[DecodeFailure]]:
    """
    Read each field spec in order from the start of ``data``, or from the
    current position of an existing reader.

    Returns the decoded values and the first failure, if any. With
    ``stop_on_failure=False`` decoding continues past a failure; under the
    fail-to-end policy every later field then fails too and is reported
    with ``value=None``.
    """
    reader = data if isinstance(data, CursorReader) else open_reader(data)

    out: List[DecodedValue] = []
    first_failure: Optional[DecodeFailure] = None
    # field specs report failures by raising
    was_strict, reader.strict = reader.strict, True
    try:
        for spec in specs:
            start = reader.tell()
            try:
                value = spec.read(reader)
            except DecodeError as e:
                _logger.debug("field %s failed at %d", spec.name, start)
                if first_failure is None:
                    first_failure = e.failure
                if stop_on_failure:
                    break
                value = None
            out.append(DecodedValue(name=spec.name, offset=start, width=spec.width, value=_plain(value)))
    finally:
        reader.strict = was_strict
    return out, first_failure
