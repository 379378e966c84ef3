"""
Type-safe wrappers for Discord snowflake identifiers.

Snowflakes are 64-bit integers, but the web panel sends them as strings in
URL paths and JSON bodies. These wrappers accept either form and keep the
string representation so values round-trip through JSON untouched.
"""

from __future__ import annotations

import re
from typing import Union

_DIGITS = re.compile(r"[0-9]+")


class _Snowflake:
    """Shared behaviour for snowflake wrappers.

    Attributes:
        _value (str): The snowflake ID stored as a string for JSON parity.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "_Snowflake"]) -> None:
        """
        Initialize from a string, int, or another wrapper of the same type.

        Raises:
            ValueError: If the value cannot be converted to a valid snowflake.
        """
        if isinstance(value, type(self)):
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool: {value}")
        elif isinstance(value, int):
            if value < 0:
                raise ValueError(f"Cannot create {type(self).__name__} from negative value: {value}")
            self._value = str(value)
        elif isinstance(value, str):
            if not _DIGITS.fullmatch(value):
                raise ValueError(f"Cannot create {type(self).__name__} from {value!r}")
            self._value = str(int(value))
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")

    @classmethod
    def from_int(cls, value: int):
        return cls(value)

    def to_int(self) -> int:
        """Return the snowflake as an integer, as stored in SQLite."""
        return int(self._value)

    def __str__(self) -> str:
        """Return the string representation for JSON serialization."""
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, type(self)):
            return self._value == other._value
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


class GuildID(_Snowflake):
    """
    Type-safe wrapper for Discord guild snowflake IDs.

    Example:
        >>> gid = GuildID("123456789012345678")
        >>> gid.to_int()
        123456789012345678
        >>> str(GuildID.from_int(42))
        '42'
    """

    __slots__ = ()


class UserID(_Snowflake):
    """Type-safe wrapper for Discord user snowflake IDs."""

    __slots__ = ()
