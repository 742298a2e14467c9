from __future__ import annotations
from datareader.models.failure import DecodeFailure, FailureKind


class DecodeError(ValueError):
    """Raised by a strict reader; ``failure`` holds the classified cause."""

    def __init__(self, failure: DecodeFailure):
        super().__init__(failure.describe())
        self.failure = failure


class InsufficientData(DecodeError):
    pass


class InvalidEncoding(DecodeError):
    pass


def error_for(failure: DecodeFailure) -> DecodeError:
    if failure.kind is FailureKind.INSUFFICIENT_DATA:
        return InsufficientData(failure)
    return InvalidEncoding(failure)
