from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class AccessMode(str, Enum):
    READ_ONLY = "read-only"
    READ_WRITE = "read-write"


@dataclass(frozen=True, slots=True)
class MethodRequirement:
    """A method the contract requires (signature only)."""

    name: str
    parameters: tuple[tuple[str, Any], ...] = ()
    returns: Any = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": "method",
            "name": self.name,
            "parameters": [{"name": n, "type": _type_name(t)} for n, t in self.parameters],
            "returns": _type_name(self.returns),
        }


@dataclass(frozen=True, slots=True)
class PropertyRequirement:
    name: str
    type: Any = None
    access: AccessMode = AccessMode.READ_ONLY

    @property
    def writable(self) -> bool:
        return self.access is AccessMode.READ_WRITE

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": "property",
            "name": self.name,
            "type": _type_name(self.type),
            "access": self.access.value,
        }


Member = Union[MethodRequirement, PropertyRequirement]


@dataclass(frozen=True, slots=True)
class ContractSpec:
    """Runtime description of a contract: its name and ordered members."""

    name: str
    members: tuple[Member, ...]

    @property
    def member_names(self) -> list[str]:
        return [m.name for m in self.members]

    @property
    def methods(self) -> list[MethodRequirement]:
        return [m for m in self.members if isinstance(m, MethodRequirement)]

    @property
    def properties(self) -> list[PropertyRequirement]:
        return [m for m in self.members if isinstance(m, PropertyRequirement)]

    def get(self, name: str) -> Member | None:
        for m in self.members:
            if m.name == name:
                return m
        return None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "members": [m.as_dict() for m in self.members]}


def _type_name(t: Any) -> str | None:
    if t is None:
        return None
    if t is type(None):
        return "None"
    if isinstance(t, str):
        return t
    if isinstance(t, type):
        return t.__qualname__
    return repr(t)
