from __future__ import annotations
from typing import Any
from pydantic import BaseModel, Field


class DecodedValue(BaseModel):
    name: str
    offset: int = Field(..., ge=0)
    width: int = Field(..., ge=0)
    value: Any = None
