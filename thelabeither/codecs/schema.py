"""
Pydantic core schemas for `Either` and `Option` field annotations.

Both are validated with plain validator functions that run the codecs from
this package, so a Pydantic model reads and writes exactly the same documents
as the codecs do when used on their own.
"""

from collections.abc import Callable
from typing import Any, Final, get_args, get_origin

from pydantic_core import CoreSchema, core_schema

from ..either import Left, Right
from ..errors import AbsentValueEncodeError
from ..option import ABSENT, Absent, Option, Present
from .base import Codec, TypeAdapterCodec
from .either import EitherCodec, LeftCodec, RightCodec
from .option import OptionCodec, PresentCodec

# Stands in for an Absent field while `PresenceModel` dumps itself. The field's
# key is removed from the output afterwards.
OMITTED_FIELD: Final = object()


def _type_args(source: Any, count: int) -> tuple[Any, ...]:
    args = get_args(source)
    if len(args) != count:
        return (Any,) * count
    return args


def _plain_schema(
    validate: Callable[[Any], Any],
    serialize: Callable[[Any], Any],
) -> CoreSchema:
    return core_schema.no_info_plain_validator_function(
        validate,
        serialization=core_schema.plain_serializer_function_ser_schema(serialize),
    )


def either_schema(source: Any) -> CoreSchema:
    origin = get_origin(source) or source
    codec: EitherCodec[Any, Any] | LeftCodec[Any] | RightCodec[Any]
    left_codec: Codec[Any] | None = None
    right_codec: Codec[Any] | None = None
    if origin is Left:
        (left,) = _type_args(source, 1)
        left_codec = TypeAdapterCodec(left)
        codec = LeftCodec(left_codec)
    elif origin is Right:
        (right,) = _type_args(source, 1)
        right_codec = TypeAdapterCodec(right)
        codec = RightCodec(right_codec)
    else:
        left, right = _type_args(source, 2)
        left_codec = TypeAdapterCodec(left)
        right_codec = TypeAdapterCodec(right)
        codec = EitherCodec(left_codec, right_codec)

    def validate(value: Any) -> Any:
        # Instances only get their payload checked against the inner type
        match value:
            case Left(payload) if left_codec is not None:
                return Left(left_codec.decode(payload))
            case Right(payload) if right_codec is not None:
                return Right(right_codec.decode(payload))
        return codec.decode(value)

    return _plain_schema(validate, codec.encode)


def option_schema(source: Any) -> CoreSchema:
    origin = get_origin(source) or source
    (inner_type,) = _type_args(source, 1)
    inner = TypeAdapterCodec(inner_type)

    if origin is Present:
        present = PresentCodec(inner)

        def validate_present(value: Any) -> Present[Any]:
            if isinstance(value, Absent):
                raise ValueError("Expected a present value")
            if isinstance(value, Present):
                value = value.value
            return present.decode(value)

        return _plain_schema(validate_present, present.encode)

    option = OptionCodec(inner)

    def validate(value: Any) -> Option[Any]:
        if isinstance(value, Absent):
            return ABSENT
        if isinstance(value, Present):
            value = value.value
        return option.decode(value)

    def serialize(value: Any) -> Any:
        if value is OMITTED_FIELD:
            return None
        if isinstance(value, Present):
            return inner.encode(value.value)
        # Anywhere else, writing Absent as null would read back as Present(None)
        raise AbsentValueEncodeError()

    return _plain_schema(validate, serialize)


__all__ = [
    "OMITTED_FIELD",
    "either_schema",
    "option_schema",
]
