from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    INSUFFICIENT_DATA = "insufficient_data"
    INVALID_ENCODING = "invalid_encoding"


class DecodeFailure(BaseModel):
    kind: FailureKind
    offset: int = Field(..., ge=0)
    width: int = Field(..., ge=0)
    available: int = Field(..., ge=0)
    detail: str | None = None

    def describe(self) -> str:
        msg = f"{self.kind.value}: need {self.width} at {self.offset}, have {self.available}"
        return f"{msg} ({self.detail})" if self.detail else msg
