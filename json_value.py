# json_value.py
# Value tree produced by mini_json.parse()
#
# =============================================================================
#  DATA MODEL
# =============================================================================
#
# A parsed document is a closed tagged union of six frozen dataclasses.
# Containers hold tuples, never lists, so a tree cannot be edited after the
# parser hands it back. Equality is structural and includes the variant:
# Number(1) != Bool(True) even though 1 == True in Python.
#
# Object members are an ordered sequence of (key, value) pairs rather than a
# dict. Repeated keys are legal in the grammar and are kept in source order.
# =============================================================================

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Number:
    value: int


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Array:
    items: Tuple["Value", ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)


@dataclass(frozen=True)
class Object:
    members: Tuple[Tuple[str, "Value"], ...] = ()

    def __len__(self) -> int:
        return len(self.members)

    def keys(self) -> Tuple[str, ...]:
        """Keys in source order, duplicates included."""
        return tuple(k for k, _ in self.members)

    def get(self, key: str, default: Optional["Value"] = None) -> Optional["Value"]:
        """Value of the first member named `key`."""
        for k, v in self.members:
            if k == key:
                return v
        return default


Value = Union[Null, Bool, Number, String, Array, Object]

# ---------------------------------------------------------------------------
# RENDERER
# ---------------------------------------------------------------------------
def render(value: Value) -> str:
    """
    Compact text form of a tree, in the same reduced grammar the parser reads.

    String payloads are written back verbatim; the grammar has no escapes, so
    a payload can never contain a double quote in the first place.
    """
    if isinstance(value, Null):
        return "null"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Number):
        return str(value.value)
    if isinstance(value, String):
        return f'"{value.value}"'
    if isinstance(value, Array):
        return "[" + ",".join(render(v) for v in value.items) + "]"
    if isinstance(value, Object):
        return "{" + ",".join(f'"{k}":{render(v)}' for k, v in value.members) + "}"
    raise TypeError(f"not a Value: {value!r}")
