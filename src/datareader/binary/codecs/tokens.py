from __future__ import annotations
import re
from typing import Iterable, List

from .record import ArrayField, FieldSpec, ScalarField, TextField
from .scalars import SCALARS

# u32 | s16[4] | text:5
_TOKEN = re.compile(r"^(?:(?P<scalar>[a-z]+\d*)(?:\[(?P<count>\d+)\])?|text:(?P<text>\d+))$")


def parse_token(tok: str, *, name: str | None = None) -> FieldSpec:
    m = _TOKEN.match(tok.strip().lower())
    if m is None:
        raise ValueError(f"bad layout token {tok!r}")
    name = name or tok
    if m.group("text") is not None:
        return TextField(name, int(m.group("text")))
    scalar = SCALARS.get(m.group("scalar"))
    if scalar is None:
        raise ValueError(f"unknown scalar {m.group('scalar')!r} (known: {', '.join(SCALARS)})")
    if m.group("count") is not None:
        return ArrayField(name, scalar, int(m.group("count")))
    return ScalarField(name, scalar)


def parse_layout(tokens: Iterable[str]) -> List[FieldSpec]:
    """Parse tokens in order; each field is named ``<index>:<token>``."""
    return [parse_token(tok, name=f"{i}:{tok}") for i, tok in enumerate(tokens)]
