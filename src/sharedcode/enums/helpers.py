"""Small helpers over enumeration types and members."""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from sharedcode.enums.labels import require_enum_type

E = TypeVar("E", bound=Enum)


def enum_to_list(enum_type: type[E]) -> list[E]:
    """Return the members of ``enum_type`` in declaration order, without aliases."""
    require_enum_type(enum_type)
    return list(enum_type)


def is_set(value: Enum | int, flag: Enum | int) -> bool:
    """Return True when any bit of ``flag`` is also set in ``value``."""
    return (int(value) & int(flag)) != 0  # type: ignore[arg-type]


def to_enum(value: str, enum_type: type[E]) -> E:
    """Return the member of ``enum_type`` named ``value``, ignoring case."""
    require_enum_type(enum_type)
    wanted = value.strip().casefold()
    for name, member in enum_type.__members__.items():
        if name.casefold() == wanted:
            return member
    raise ValueError(f"{value!r} is not a member name of {enum_type.__name__}")
