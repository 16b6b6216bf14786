from typing import Any, Protocol
import logging

import pydantic
import pydantic_core

from ..errors import DecodeError, EncodeError, InvalidValueError

logger = logging.getLogger(__name__)


class Codec[T](Protocol):
    """
    Reads one value from, and writes one value to, a JSON-compatible Python
    structure (dicts, lists, strings, numbers, booleans and ``None``).

    ``decode`` must raise `DecodeError` (or a subclass) for input it can't
    accept.
    """

    def encode(self, value: T) -> Any: ...

    def decode(self, raw: Any) -> T: ...


class TypeAdapterCodec[T]:
    """
    Codec for any type Pydantic knows how to validate and dump.
    """

    adapter: pydantic.TypeAdapter[T]

    def __init__(self, tp: type[T] | Any) -> None:
        self.adapter = pydantic.TypeAdapter(tp)

    def encode(self, value: T) -> Any:
        try:
            return self.adapter.dump_python(value, mode="json")
        except pydantic_core.PydanticSerializationError as e:
            raise EncodeError(str(e)) from e

    def decode(self, raw: Any) -> T:
        try:
            return self.adapter.validate_python(raw)
        except pydantic_core.ValidationError as e:
            logger.debug("Rejected value %r: %s", raw, e)
            raise InvalidValueError(str(e), details=e.errors()) from e


def dumps[T](codec: Codec[T], value: T) -> str:
    """Encode ``value`` with ``codec`` and render it as compact JSON text."""
    return pydantic_core.to_json(codec.encode(value)).decode()


def loads[T](codec: Codec[T], text: str | bytes) -> T:
    """Parse JSON text and decode the result with ``codec``."""
    try:
        raw = pydantic_core.from_json(text)
    except ValueError as e:
        raise DecodeError("Could not decode value as JSON") from e
    return codec.decode(raw)


__all__ = [
    "Codec",
    "TypeAdapterCodec",
    "dumps",
    "loads",
]
