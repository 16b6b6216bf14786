from typing import Any, Literal

Side = Literal["left", "right", "value"]


class WrongSideAccessError(RuntimeError):
    """
    Raised when reading the side of an Either (or the value of an Option)
    that isn't held. The held value is kept on the exception for diagnostics.
    """

    requested: Side
    value: Any

    def __init__(self, message: str, requested: Side, value: Any = None) -> None:
        super().__init__(message)
        self.requested = requested
        self.value = value


class AccessRightOnLeftError(WrongSideAccessError):
    def __init__(self, value: Any) -> None:
        super().__init__(f"Cannot get `right` on Left({value!r})", "right", value)


class AccessLeftOnRightError(WrongSideAccessError):
    def __init__(self, value: Any) -> None:
        super().__init__(f"Cannot get `left` on Right({value!r})", "left", value)


class AccessAbsentValueError(WrongSideAccessError):
    def __init__(self) -> None:
        super().__init__("Failed to get `value` on Absent option", "value")


class EscapeReturnedError(RuntimeError):
    """
    Raised when the escape function given to a ``require_*`` method returns
    instead of raising.
    """


class DecodeError(ValueError):
    """
    Base class for every failure to turn a document back into a value.

    Subclasses ``ValueError`` so that Pydantic validators report it as a
    regular ``ValidationError``.
    """

    details: list[Any]

    def __init__(self, message: str, details: list[Any] | None = None) -> None:
        super().__init__(message)
        self.details = details if details is not None else []


class MissingFieldError(DecodeError):
    pass


class ConflictingFieldsError(DecodeError):
    pass


class MalformedDocumentError(DecodeError):
    pass


class InvalidValueError(DecodeError):
    pass


class EncodeError(ValueError):
    pass


class AbsentValueEncodeError(EncodeError):
    def __init__(self) -> None:
        super().__init__(
            "Absent has no standalone representation; omit the field instead"
        )


__all__ = [
    "AbsentValueEncodeError",
    "AccessAbsentValueError",
    "AccessLeftOnRightError",
    "AccessRightOnLeftError",
    "ConflictingFieldsError",
    "DecodeError",
    "EncodeError",
    "EscapeReturnedError",
    "InvalidValueError",
    "MalformedDocumentError",
    "MissingFieldError",
    "WrongSideAccessError",
]
