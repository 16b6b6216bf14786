from collections.abc import Callable, Sequence
from typing import Any
import json
import logging

from django.core.exceptions import ValidationError
from django.db.backends.base.base import BaseDatabaseWrapper
from django.db.models import Model, expressions
from django.db.models.expressions import Expression
from django.db.models.fields.json import JSONField
from django.utils.translation import gettext_lazy as _
from django_stubs_ext import StrOrPromise
from thelabtyping.result import Err, Ok, Result
import pydantic_core

from ..codecs import Codec, EitherCodec, TypeAdapterCodec
from ..either import Either, Left, Right
from ..errors import DecodeError, EncodeError
from ..presence import PresenceModel

logger = logging.getLogger(__name__)


def _decode_error_to_django(err: DecodeError) -> ValidationError:
    """
    Convert a codec error into a Django error
    """
    return ValidationError(
        str(err),
        code="invalid",
        params={
            "details": err.details,
        },
    )


def _decode[T](codec: Codec[T], value: Any) -> Result[T, DecodeError]:
    try:
        return Ok(codec.decode(value))
    except DecodeError as e:
        return Err(e)


class CodecField[T](JSONField[T, T]):
    """
    Subclass of Django's
    [JSONField](https://docs.djangoproject.com/en/dev/ref/models/fields/#django.db.models.JSONField)
    that reads and writes its value through a codec. Subclasses set
    ``value_types`` and build ``codec`` in their constructor.
    """

    description = "A value stored as JSON through a codec"

    value_types: tuple[type, ...] = ()
    codec: Codec[T]
    coerce_invalid_data: Callable[[Any], Any] | None

    def __init__(
        self,
        verbose_name: StrOrPromise | None = None,
        name: str | None = None,
        coerce_invalid_data: Callable[[Any], Any] | None = None,
        **kwargs: Any,
    ) -> None:
        self.coerce_invalid_data = coerce_invalid_data
        super().__init__(
            verbose_name=verbose_name,
            name=name,
            **kwargs,
        )

    def deconstruct(self) -> tuple[str, str, Sequence[Any], dict[str, Any]]:
        name, path, args, kwargs = super().deconstruct()
        kwargs["coerce_invalid_data"] = self.coerce_invalid_data
        return name, path, args, kwargs

    def from_db_value(
        self,
        value: str | None,
        expression: Expression,
        connection: BaseDatabaseWrapper,
    ) -> T | None:
        """
        Convert DB value -> Python value
        """
        if value is None:
            return value
        try:
            parsed_value = json.loads(value, cls=self.decoder)
        except json.JSONDecodeError:
            raise ValidationError(
                _("Could not decode value as JSON"),
                code="invalid",
                params={"value": value},
            )

        result = _decode(self.codec, parsed_value)
        if result.is_ok:
            return result.ok_value

        # Give the `coerce_invalid_data` hook a chance to repair rows written
        # in an older shape, then decode again.
        if self.coerce_invalid_data is not None:
            coerced = self.coerce_invalid_data(parsed_value)
            result = _decode(self.codec, coerced)
            if result.is_ok:
                logger.info(
                    "Coerced invalid data loaded into %s.%s",
                    self.model.__name__,
                    self.name,
                )
                return result.ok_value

        raise _decode_error_to_django(result.err_value)

    def get_db_prep_value(
        self,
        value: Any,
        connection: BaseDatabaseWrapper,
        prepared: bool = False,
    ) -> Any:
        """
        Convert Python value -> DB value
        """
        if not prepared:
            value = self.get_prep_value(value)
        if isinstance(value, expressions.Value) and isinstance(
            value.output_field, JSONField
        ):
            value = value.value
        elif isinstance(value, self.value_types):
            value = self.codec.encode(value)
        elif hasattr(value, "as_sql"):
            return value

        return connection.ops.adapt_json_value(value, self.encoder)

    def validate(self, value: Any, model_instance: Model | None) -> None:
        # Encode the value and decode it again. This catches payloads that
        # don't match the declared types.
        if value is None:
            return super().validate(value, model_instance)
        if not isinstance(value, self.value_types):
            raise ValidationError(
                _("Given value is type[%s], expected one of %s")
                % (
                    type(value),
                    [t.__name__ for t in self.value_types],
                )
            )
        try:
            encoded = self.codec.encode(value)
        except (EncodeError, pydantic_core.PydanticSerializationError) as e:
            raise ValidationError(str(e), code="invalid")
        result = _decode(self.codec, encoded)
        if result.is_err:
            raise _decode_error_to_django(result.err_value)
        # Use the encoded value to do all the upstream validation.
        super().validate(encoded, model_instance)


class EitherField[L, R](CodecField[Either[L, R]]):
    """
    Stores an `Either` as ``{"left": ...}`` or ``{"right": ...}``.

    ```py
    class Job(models.Model):
        outcome = EitherField(int, str, null=True)
    ```
    """

    description = "An Either value stored as JSON in the DB"

    value_types = (Left, Right)
    left_type: Any
    right_type: Any

    def __init__(
        self,
        left_type: Any,
        right_type: Any,
        verbose_name: StrOrPromise | None = None,
        name: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.left_type = left_type
        self.right_type = right_type
        self.codec = EitherCodec(
            TypeAdapterCodec(left_type),
            TypeAdapterCodec(right_type),
        )
        super().__init__(verbose_name=verbose_name, name=name, **kwargs)

    def deconstruct(self) -> tuple[str, str, Sequence[Any], dict[str, Any]]:
        name, path, args, kwargs = super().deconstruct()
        kwargs["left_type"] = self.left_type
        kwargs["right_type"] = self.right_type
        return name, path, args, kwargs


class PresenceModelField[M: PresenceModel](CodecField[M]):
    """
    Stores a `PresenceModel`. Absent fields are left out of the stored JSON
    and come back as ``ABSENT``; fields explicitly set to ``Present(None)``
    are stored as ``null``.
    """

    description = "A presence-aware Pydantic model stored as JSON in the DB"

    model_cls: type[M]

    def __init__(
        self,
        model_cls: type[M],
        verbose_name: StrOrPromise | None = None,
        name: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.model_cls = model_cls
        self.value_types = (model_cls,)
        self.codec = TypeAdapterCodec(model_cls)
        super().__init__(verbose_name=verbose_name, name=name, **kwargs)

    def deconstruct(self) -> tuple[str, str, Sequence[Any], dict[str, Any]]:
        name, path, args, kwargs = super().deconstruct()
        kwargs["model_cls"] = self.model_cls
        return name, path, args, kwargs


__all__ = [
    "CodecField",
    "EitherField",
    "PresenceModelField",
]
