from collections.abc import Callable
from typing import Any, Literal, Never, NoReturn, Self, final

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema

from .errors import (
    AccessLeftOnRightError,
    AccessRightOnLeftError,
    EscapeReturnedError,
)
from .option import ABSENT, Option, Present


def _cause(value: Any) -> BaseException | None:
    return value if isinstance(value, BaseException) else None


class Either[L, R]:
    """
    Base class of `Left` and `Right`. An Either holds exactly one of its two
    sides; those two classes are the only implementations.
    """

    __slots__ = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError("Either can only be Left or Right")

    def __new__(cls, *args: Any, **kwargs: Any) -> Self:
        if cls is Either:
            raise TypeError("Either cannot be instantiated, use Left or Right")
        return super().__new__(cls)

    @property
    def left(self) -> L:
        raise NotImplementedError

    @property
    def right(self) -> R:
        raise NotImplementedError

    @property
    def left_or_none(self) -> L | None:
        raise NotImplementedError

    @property
    def right_or_none(self) -> R | None:
        raise NotImplementedError

    @property
    def is_left(self) -> bool:
        return False

    @property
    def is_right(self) -> bool:
        return False

    def invert(self) -> "Either[R, L]":
        """Swap sides: a `Left` becomes a `Right` and vice versa."""
        raise NotImplementedError

    def left_as_option(self) -> Option[L]:
        raise NotImplementedError

    def right_as_option(self) -> Option[R]:
        raise NotImplementedError

    def also_left(self, block: Callable[[L], object]) -> Self:
        if isinstance(self, Left):
            block(self.left)
        return self

    def also_right(self, block: Callable[[R], object]) -> Self:
        if isinstance(self, Right):
            block(self.right)
        return self

    def also_both(
        self,
        on_left: Callable[[L], object],
        on_right: Callable[[R], object],
    ) -> Self:
        if isinstance(self, Left):
            on_left(self.left)
        elif isinstance(self, Right):
            on_right(self.right)
        return self

    def let_left[NL](self, block: Callable[[L], NL]) -> "Either[NL, R]":
        if isinstance(self, Left):
            return Left(block(self.left))
        return self  # type:ignore[return-value]

    def let_right[NR](self, block: Callable[[R], NR]) -> "Either[L, NR]":
        if isinstance(self, Right):
            return Right(block(self.right))
        return self  # type:ignore[return-value]

    def let_both[NL, NR](
        self,
        on_left: Callable[[L], NL],
        on_right: Callable[[R], NR],
    ) -> "Either[NL, NR]":
        if isinstance(self, Left):
            return Left(on_left(self.left))
        return Right(on_right(self.right))

    def try_left[NL](
        self,
        block: "Callable[[L], Either[NL, R]]",
    ) -> "Either[NL, R]":
        """
        Chain a fallible step on the left side. ``block`` only runs on a
        `Left`; a `Right` is passed through untouched, so a chain of
        ``try_left`` calls stops at the first step that returns a `Right`::

            result = (
                Left("42")
                .try_left(parse_int)
                .try_left(check_in_range)
                .require_left(bail)
            )
        """
        if isinstance(self, Left):
            return block(self.left)
        return self  # type:ignore[return-value]

    def try_right[NR](
        self,
        block: "Callable[[R], Either[L, NR]]",
    ) -> "Either[L, NR]":
        """Mirror of `try_left` for the right side."""
        if isinstance(self, Right):
            return block(self.right)
        return self  # type:ignore[return-value]

    def require_left(self, escape: "Callable[[Right[R]], NoReturn]") -> L:
        """
        Return the left value. On a `Right`, ``escape`` is called once with it
        and is expected to raise. If it returns anyway, `EscapeReturnedError`
        is raised.
        """
        if isinstance(self, Left):
            return self.left
        escape(self)  # type:ignore[arg-type]
        raise EscapeReturnedError("require_left() escape function returned")

    def require_right(self, escape: "Callable[[Left[L]], NoReturn]") -> R:
        """Mirror of `require_left` for the right side."""
        if isinstance(self, Right):
            return self.right
        escape(self)  # type:ignore[arg-type]
        raise EscapeReturnedError("require_right() escape function returned")

    def fold_left(self, block: Callable[[L], R]) -> R:
        """Return the right value, converting a left one with ``block``."""
        if isinstance(self, Left):
            return block(self.left)
        return self.right

    def fold_right(self, block: Callable[[R], L]) -> L:
        """Return the left value, converting a right one with ``block``."""
        if isinstance(self, Right):
            return block(self.right)
        return self.left

    def fold_both[T](
        self,
        on_left: Callable[[L], T],
        on_right: Callable[[R], T],
    ) -> T:
        if isinstance(self, Left):
            return on_left(self.left)
        return on_right(self.right)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        from .codecs.schema import either_schema

        return either_schema(source)


@final
class Left[L](Either[L, Never]):
    __slots__ = ("_value",)
    __match_args__ = ("left",)

    _value: L

    def __init__(self, value: L) -> None:
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def left(self) -> L:
        return self._value

    @property
    def right(self) -> Never:
        raise AccessRightOnLeftError(self._value) from _cause(self._value)

    @property
    def left_or_none(self) -> L:
        return self._value

    @property
    def right_or_none(self) -> None:
        return None

    @property
    def is_left(self) -> Literal[True]:
        return True

    @property
    def is_right(self) -> Literal[False]:
        return False

    def invert(self) -> "Right[L]":
        return Right(self._value)

    def left_as_option(self) -> Present[L]:
        return Present(self._value)

    def right_as_option(self) -> Option[Never]:
        return ABSENT

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Left):
            return NotImplemented
        return bool(self._value == other._value)

    def __hash__(self) -> int:
        return hash((Left, self._value))

    def __reduce__(self) -> tuple[type["Left[L]"], tuple[L]]:
        return (Left, (self._value,))

    def __repr__(self) -> str:
        return f"Left({self._value!r})"


@final
class Right[R](Either[Never, R]):
    __slots__ = ("_value",)
    __match_args__ = ("right",)

    _value: R

    def __init__(self, value: R) -> None:
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def left(self) -> Never:
        raise AccessLeftOnRightError(self._value) from _cause(self._value)

    @property
    def right(self) -> R:
        return self._value

    @property
    def left_or_none(self) -> None:
        return None

    @property
    def right_or_none(self) -> R:
        return self._value

    @property
    def is_left(self) -> Literal[False]:
        return False

    @property
    def is_right(self) -> Literal[True]:
        return True

    def invert(self) -> "Left[R]":
        return Left(self._value)

    def left_as_option(self) -> Option[Never]:
        return ABSENT

    def right_as_option(self) -> Present[R]:
        return Present(self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Right):
            return NotImplemented
        return bool(self._value == other._value)

    def __hash__(self) -> int:
        return hash((Right, self._value))

    def __reduce__(self) -> tuple[type["Right[R]"], tuple[R]]:
        return (Right, (self._value,))

    def __repr__(self) -> str:
        return f"Right({self._value!r})"


__all__ = [
    "Either",
    "Left",
    "Right",
]
