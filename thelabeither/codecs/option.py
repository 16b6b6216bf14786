from collections.abc import Mapping, MutableMapping
from typing import Any

from ..errors import AbsentValueEncodeError
from ..option import ABSENT, Option, Present
from .base import Codec


class OptionCodec[T]:
    """
    Maps an `Option` onto a single field of a document, using the presence of
    the key as the signal:

    - ``Absent`` -> key left out
    - ``Present(None)`` -> ``"key": null``
    - ``Present(x)`` -> ``"key": <x>``
    """

    inner: Codec[T]

    def __init__(self, inner: Codec[T]) -> None:
        self.inner = inner

    def encode_field(
        self,
        document: MutableMapping[str, Any],
        name: str,
        value: Option[T],
    ) -> None:
        if isinstance(value, Present):
            document[name] = self.inner.encode(value.value)

    def decode_field(self, document: Mapping[str, Any], name: str) -> Option[T]:
        if name not in document:
            return ABSENT
        return Present(self.inner.decode(document[name]))

    def encode(self, value: Option[T]) -> Any:
        # Used when nested as an inner codec, where there is no key to omit
        if not isinstance(value, Present):
            raise AbsentValueEncodeError()
        return self.inner.encode(value.value)

    def decode(self, raw: Any) -> Option[T]:
        return Present(self.inner.decode(raw))


class PresentCodec[T]:
    """
    Encodes a `Present` as its bare inner value, without any wrapping object.
    """

    inner: Codec[T]

    def __init__(self, inner: Codec[T]) -> None:
        self.inner = inner

    def encode(self, value: Present[T]) -> Any:
        return self.inner.encode(value.value)

    def decode(self, raw: Any) -> Present[T]:
        return Present(self.inner.decode(raw))


__all__ = [
    "OptionCodec",
    "PresentCodec",
]
