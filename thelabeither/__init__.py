from .either import Either, Left, Right
from .errors import (
    AccessAbsentValueError,
    AccessLeftOnRightError,
    AccessRightOnLeftError,
    ConflictingFieldsError,
    DecodeError,
    EscapeReturnedError,
    MalformedDocumentError,
    MissingFieldError,
    WrongSideAccessError,
)
from .option import ABSENT, Absent, Option, Present
from .presence import PresenceModel

__all__ = [
    "ABSENT",
    "Absent",
    "AccessAbsentValueError",
    "AccessLeftOnRightError",
    "AccessRightOnLeftError",
    "ConflictingFieldsError",
    "DecodeError",
    "Either",
    "EscapeReturnedError",
    "Left",
    "MalformedDocumentError",
    "MissingFieldError",
    "Option",
    "PresenceModel",
    "Present",
    "Right",
    "WrongSideAccessError",
]
