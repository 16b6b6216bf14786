from collections.abc import Mapping
from typing import Any, Final
import logging

from thelabtyping.result import Err, Ok, Result

from ..either import Either, Left, Right
from ..errors import (
    ConflictingFieldsError,
    DecodeError,
    MalformedDocumentError,
    MissingFieldError,
)
from ..option import ABSENT, Absent, Option, Present
from .base import Codec

logger = logging.getLogger(__name__)

LEFT: Final = "left"
RIGHT: Final = "right"


def _fields(document: Any) -> Mapping[str, Any]:
    if not isinstance(document, Mapping):
        raise MalformedDocumentError(
            f"Expected an object, got {type(document).__name__}"
        )
    return document


class EitherCodec[L, R]:
    """
    Encodes an `Either` as an object holding exactly one of two keys::

        Left("value")  <-> {"left": "value"}
        Right(42)      <-> {"right": 42}

    Decoding rejects objects with neither key, with both keys, or with any
    other key.
    """

    left: Codec[L]
    right: Codec[R]

    def __init__(self, left: Codec[L], right: Codec[R]) -> None:
        self.left = left
        self.right = right

    def encode(self, value: Either[L, R]) -> dict[str, Any]:
        if isinstance(value, Left):
            return {LEFT: self.left.encode(value.left)}
        if isinstance(value, Right):
            return {RIGHT: self.right.encode(value.right)}
        raise TypeError(f"Expected Left or Right, got {type(value).__name__}")

    def decode(self, document: Any) -> Either[L, R]:
        # Keys may come in any order, so collect both sides before deciding.
        # Payloads are only decoded once the shape of the object is known to
        # be valid.
        left: Option[Any] = ABSENT
        right: Option[Any] = ABSENT
        for key, raw in _fields(document).items():
            if key == LEFT:
                left = Present(raw)
            elif key == RIGHT:
                right = Present(raw)
            else:
                raise MalformedDocumentError(f"Unexpected field: {key!r}")

        match (left, right):
            case (Present(raw), Absent()):
                return Left(self.left.decode(raw))
            case (Absent(), Present(raw)):
                return Right(self.right.decode(raw))
            case (Present(), Present()):
                raise ConflictingFieldsError(
                    "Either contains both left and right values"
                )
            case _:
                raise MissingFieldError(
                    "Either contains neither left nor right value"
                )

    def try_decode(self, document: Any) -> Result[Either[L, R], DecodeError]:
        try:
            return Ok(self.decode(document))
        except DecodeError as e:
            logger.debug("Could not decode Either from %r: %s", document, e)
            return Err(e)


class LeftCodec[L]:
    """Codec for a value known to be a `Left`: ``{"left": ...}``."""

    inner: Codec[L]

    def __init__(self, inner: Codec[L]) -> None:
        self.inner = inner

    def encode(self, value: Left[L]) -> dict[str, Any]:
        return {LEFT: self.inner.encode(value.left)}

    def decode(self, document: Any) -> Left[L]:
        fields = _fields(document)
        unexpected = fields.keys() - {LEFT}
        if unexpected:
            raise MalformedDocumentError(
                f"Unexpected fields: {sorted(unexpected, key=str)}"
            )
        if LEFT not in fields:
            raise MissingFieldError("Cannot decode Left, `left` not found")
        return Left(self.inner.decode(fields[LEFT]))


class RightCodec[R]:
    """Codec for a value known to be a `Right`: ``{"right": ...}``."""

    inner: Codec[R]

    def __init__(self, inner: Codec[R]) -> None:
        self.inner = inner

    def encode(self, value: Right[R]) -> dict[str, Any]:
        return {RIGHT: self.inner.encode(value.right)}

    def decode(self, document: Any) -> Right[R]:
        fields = _fields(document)
        unexpected = fields.keys() - {RIGHT}
        if unexpected:
            raise MalformedDocumentError(
                f"Unexpected fields: {sorted(unexpected, key=str)}"
            )
        if RIGHT not in fields:
            raise MissingFieldError("Cannot decode Right, `right` not found")
        return Right(self.inner.decode(fields[RIGHT]))


__all__ = [
    "LEFT",
    "RIGHT",
    "EitherCodec",
    "LeftCodec",
    "RightCodec",
]
