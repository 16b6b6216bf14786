"""
Presence wrapper: an `Option` is either `Present(value)` or `Absent`.

Unlike ``T | None``, an Option can hold ``None`` as a real value, which lets a
document field tell "missing" apart from "explicitly null".
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Literal, Never, NoReturn, Self, final

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema

from .errors import AccessAbsentValueError, EscapeReturnedError

if TYPE_CHECKING:
    from .either import Either


class Option[T]:
    """
    Base class of `Present` and `Absent`. Those are the only two
    implementations; subclassing this from anywhere else is an error.
    """

    __slots__ = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError("Option can only be Present or Absent")

    def __new__(cls, *args: Any, **kwargs: Any) -> Self:
        if cls is Option:
            raise TypeError("Option cannot be instantiated, use Present or ABSENT")
        return super().__new__(cls)

    @property
    def value(self) -> T:
        """The held value. Raises `AccessAbsentValueError` on `Absent`."""
        raise NotImplementedError

    @property
    def value_or_none(self) -> T | None:
        raise NotImplementedError

    @property
    def is_present(self) -> bool:
        return False

    @property
    def is_absent(self) -> bool:
        return False

    def also_present(self, block: Callable[[T], object]) -> Self:
        """Call ``block`` with the value when present. Returns ``self``."""
        if isinstance(self, Present):
            block(self.value)
        return self

    def also_absent(self, block: Callable[[], object]) -> Self:
        """Call ``block`` when absent. Returns ``self``."""
        if isinstance(self, Absent):
            block()
        return self

    def also_both(
        self,
        on_absent: Callable[[], object],
        on_present: Callable[[T], object],
    ) -> Self:
        if isinstance(self, Present):
            on_present(self.value)
        else:
            on_absent()
        return self

    def let_present[U](self, block: Callable[[T], U]) -> "Option[U]":
        """Transform the held value, if any."""
        if isinstance(self, Present):
            return Present(block(self.value))
        return ABSENT

    def let_as_left[L, R](
        self,
        on_present: Callable[[T], L],
        on_absent: Callable[[], R],
    ) -> "Either[L, R]":
        from .either import Left, Right

        if isinstance(self, Present):
            return Left(on_present(self.value))
        return Right(on_absent())

    def let_as_right[L, R](
        self,
        on_absent: Callable[[], L],
        on_present: Callable[[T], R],
    ) -> "Either[L, R]":
        from .either import Left, Right

        if isinstance(self, Present):
            return Right(on_present(self.value))
        return Left(on_absent())

    def let_absent_as_right[R](self, fallback: Callable[[], R]) -> "Either[T, R]":
        """
        Promote to an Either: the present value becomes a `Left`, and an absent
        option becomes a `Right` built by ``fallback``.
        """
        from .either import Left, Right

        if isinstance(self, Present):
            return Left(self.value)
        return Right(fallback())

    def let_absent_as_left[L](self, fallback: Callable[[], L]) -> "Either[L, T]":
        """
        Promote to an Either: the present value becomes a `Right`, and an
        absent option becomes a `Left` built by ``fallback``.
        """
        from .either import Left, Right

        if isinstance(self, Present):
            return Right(self.value)
        return Left(fallback())

    def require_present(self, escape: Callable[[], NoReturn]) -> T:
        """
        Return the held value, or call ``escape`` which must raise. ``escape``
        is called at most once.
        """
        if isinstance(self, Present):
            return self.value
        escape()
        raise EscapeReturnedError("require_present() escape function returned")

    def require_absent(self, escape: "Callable[[Present[T]], NoReturn]") -> None:
        if isinstance(self, Present):
            escape(self)
            raise EscapeReturnedError("require_absent() escape function returned")

    def fold_both[U](
        self,
        on_present: Callable[[T], U],
        on_absent: Callable[[], U],
    ) -> U:
        if isinstance(self, Present):
            return on_present(self.value)
        return on_absent()

    def fold_absent(self, fallback: Callable[[], T]) -> T:
        """Return the held value, or the result of ``fallback`` when absent."""
        if isinstance(self, Present):
            return self.value
        return fallback()

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        from .codecs.schema import option_schema

        return option_schema(source)


@final
class Present[T](Option[T]):
    __slots__ = ("_value",)
    __match_args__ = ("value",)

    _value: T

    def __init__(self, value: T) -> None:
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def value(self) -> T:
        return self._value

    @property
    def value_or_none(self) -> T:
        return self._value

    @property
    def is_present(self) -> Literal[True]:
        return True

    @property
    def is_absent(self) -> Literal[False]:
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Present):
            return NotImplemented
        return bool(self._value == other._value)

    def __hash__(self) -> int:
        return hash((Present, self._value))

    def __reduce__(self) -> tuple[type["Present[T]"], tuple[T]]:
        return (Present, (self._value,))

    def __repr__(self) -> str:
        return f"Present({self._value!r})"


@final
class Absent(Option[Never]):
    __slots__ = ()
    __match_args__ = ()

    _instance: "Absent | None" = None

    def __new__(cls) -> "Absent":
        # There is only ever one Absent
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def value(self) -> Never:
        raise AccessAbsentValueError()

    @property
    def value_or_none(self) -> None:
        return None

    @property
    def is_present(self) -> Literal[False]:
        return False

    @property
    def is_absent(self) -> Literal[True]:
        return True

    def __reduce__(self) -> str:
        return "ABSENT"

    def __repr__(self) -> str:
        return "Absent"


ABSENT = Absent()


__all__ = [
    "ABSENT",
    "Absent",
    "Option",
    "Present",
]
