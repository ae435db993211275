"""String labels declared on enumeration members, with cached two-way lookup."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from threading import Lock
from types import MappingProxyType
from typing import Any, TypeVar

E = TypeVar("E", bound=Enum)

logger = logging.getLogger(__name__)

_LABELS_ATTR = "__string_values__"


class InvalidEnumTypeError(TypeError):
    """Raised when an enumeration type or member is required but something else is given."""


def require_enum_type(enum_type: Any) -> type[Enum]:
    """Return ``enum_type`` unchanged if it is an Enum subclass, else raise."""
    if not (isinstance(enum_type, type) and issubclass(enum_type, Enum)):
        raise InvalidEnumTypeError(f"expected an Enum subclass, got {enum_type!r}")
    return enum_type


def string_values(**labels: str) -> Callable[[type[E]], type[E]]:
    """Class decorator declaring the string label of individual enum members.

    Keyword names are member names; members left out carry no label. A member
    may be labeled only once, so stacking decorators that label the same member
    raises ``ValueError``.

    Example::

        @string_values(RED="r", GREEN="g")
        class Color(Enum):
            RED = 1
            GREEN = 2
            BLUE = 3
    """

    def decorate(enum_type: type[E]) -> type[E]:
        require_enum_type(enum_type)
        declared: dict[Enum, str] = dict(vars(enum_type).get(_LABELS_ATTR, {}))
        for name, label in labels.items():
            if not isinstance(label, str):
                raise TypeError(f"label for {enum_type.__name__}.{name} must be str, got {type(label).__name__}")
            try:
                member = enum_type[name]
            except KeyError:
                raise ValueError(f"{enum_type.__name__} has no member named {name!r}") from None
            if member in declared:
                raise ValueError(f"{enum_type.__name__}.{member.name} already declares a string value")
            declared[member] = label
        setattr(enum_type, _LABELS_ATTR, declared)
        return enum_type

    return decorate


@dataclass(frozen=True, slots=True)
class EnumLabels:
    """Scanned label associations for one enumeration type."""

    by_member: Mapping[Enum, str]
    by_label: Mapping[str, Enum]
    by_folded_label: Mapping[str, Enum]


def _scan(enum_type: type[Enum]) -> EnumLabels:
    """Read declared labels for every member of ``enum_type`` in declaration order."""
    declared: Mapping[Enum, str] = vars(enum_type).get(_LABELS_ATTR, {})
    by_member: dict[Enum, str] = {}
    by_label: dict[str, Enum] = {}
    by_folded_label: dict[str, Enum] = {}
    for member in enum_type:
        label = declared.get(member)
        if label is None:
            continue
        by_member[member] = label
        by_label.setdefault(label, member)
        by_folded_label.setdefault(label.casefold(), member)
    return EnumLabels(
        by_member=MappingProxyType(by_member),
        by_label=MappingProxyType(by_label),
        by_folded_label=MappingProxyType(by_folded_label),
    )


class EnumLabelRegistry:
    """Thread-safe per-type cache of enum member labels.

    Each enumeration type is scanned at most once. Entries are never evicted;
    members without a label are recorded as absent by the same scan.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._lock = Lock()
        self._entries: dict[type[Enum], EnumLabels] = {}
        self.scan_count = 0

    def entry_for(self, enum_type: type[Enum]) -> EnumLabels:
        """Return the scanned labels of ``enum_type``, scanning on first use."""
        require_enum_type(enum_type)
        entry = self._entries.get(enum_type)
        if entry is not None:
            return entry

        with self._lock:
            entry = self._entries.get(enum_type)
            if entry is None:
                entry = _scan(enum_type)
                self._entries[enum_type] = entry
                self.scan_count += 1
                logger.debug("scanned %d labels for %s", len(entry.by_member), enum_type.__qualname__)
            return entry

    def labels_for(self, enum_type: type[Enum]) -> Mapping[Enum, str]:
        """Return a read-only member-to-label mapping for ``enum_type``."""
        return self.entry_for(enum_type).by_member

    def label_of(self, member: Enum) -> str | None:
        """Return the declared label of ``member``, or None if it has none."""
        if not isinstance(member, Enum):
            raise InvalidEnumTypeError(f"expected an Enum member, got {member!r}")
        return self.entry_for(type(member)).by_member.get(member)

    def parse(self, enum_type: type[E], label: str, ignore_case: bool = False) -> E | None:
        """Return the first declared member labeled ``label``, or None."""
        entry = self.entry_for(enum_type)
        if not isinstance(label, str):
            raise TypeError(f"label must be str, got {type(label).__name__}")
        if ignore_case:
            return entry.by_folded_label.get(label.casefold())  # type: ignore[return-value]
        return entry.by_label.get(label)  # type: ignore[return-value]

    def is_defined(self, enum_type: type[Enum], label: str, ignore_case: bool = False) -> bool:
        """Return True when some member of ``enum_type`` is labeled ``label``."""
        return self.parse(enum_type, label, ignore_case=ignore_case) is not None

    def clear(self) -> None:
        """Drop every cached entry and reset the scan counter."""
        with self._lock:
            self._entries.clear()
            self.scan_count = 0


DEFAULT_REGISTRY = EnumLabelRegistry()


def label_of(member: Enum, registry: EnumLabelRegistry | None = None) -> str | None:
    """Return the declared label of ``member``, or None if it has none."""
    return (registry or DEFAULT_REGISTRY).label_of(member)


def parse(
    enum_type: type[E],
    label: str,
    ignore_case: bool = False,
    registry: EnumLabelRegistry | None = None,
) -> E | None:
    """Return the member of ``enum_type`` whose declared label equals ``label``."""
    return (registry or DEFAULT_REGISTRY).parse(enum_type, label, ignore_case=ignore_case)


def is_defined(
    enum_type: type[Enum],
    label: str,
    ignore_case: bool = False,
    registry: EnumLabelRegistry | None = None,
) -> bool:
    """Return True when ``label`` names a member of ``enum_type``."""
    return (registry or DEFAULT_REGISTRY).is_defined(enum_type, label, ignore_case=ignore_case)
