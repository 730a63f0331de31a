from __future__ import annotations

from typing import Any

from delegate_kit.contracts.introspect import spec_for
from delegate_kit.contracts.model import ContractSpec, PropertyRequirement
from delegate_kit.errors import ReadOnlyMemberError


class ContractView:
    """Proxy that exposes exactly the members of one or more contracts.

    Reads of contract members go to the target. Anything else raises
    AttributeError, even when the target has it. Writes are only accepted
    for read-write property requirements.

    A view over another view can only narrow it: members the inner view
    hides stay hidden.
    """

    __slots__ = ("_target", "_contracts", "_spec")

    def __init__(self, target: Any, *contracts: type) -> None:
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_contracts", contracts)
        object.__setattr__(self, "_spec", spec_for(*contracts))

    def __getattr__(self, name: str) -> Any:
        # Slots are read directly: a view without _spec yet must not recurse.
        spec: ContractSpec = object.__getattribute__(self, "_spec")
        if name not in spec:
            raise AttributeError(f"{name!r} is not a member of contract {spec.name}")
        return getattr(object.__getattribute__(self, "_target"), name)

    def __setattr__(self, name: str, value: Any) -> None:
        spec: ContractSpec = object.__getattribute__(self, "_spec")
        member = spec.get(name)
        if member is None:
            raise AttributeError(f"{name!r} is not a member of contract {spec.name}")
        if not isinstance(member, PropertyRequirement) or not member.writable:
            raise ReadOnlyMemberError(spec.name, name)
        setattr(object.__getattribute__(self, "_target"), name, value)

    def __delattr__(self, name: str) -> None:
        raise ReadOnlyMemberError(object.__getattribute__(self, "_spec").name, name)

    def __dir__(self) -> list[str]:
        return object.__getattribute__(self, "_spec").member_names

    def __reduce__(self) -> tuple[Any, ...]:
        # Slot state cannot go through __setattr__; copy and pickle rebuild via __init__.
        target = object.__getattribute__(self, "_target")
        return (ContractView, (target, *object.__getattribute__(self, "_contracts")))

    def __repr__(self) -> str:
        spec = object.__getattribute__(self, "_spec")
        return f"<{spec.name} view of {object.__getattribute__(self, '_target')!r}>"


def restrict(target: Any, *contracts: type) -> ContractView:
    """Return ``target`` as seen through the given contracts."""

    return ContractView(target, *contracts)


def contract_of(view: ContractView) -> ContractSpec:
    return object.__getattribute__(view, "_spec")


def unwrap(ref: Any) -> Any:
    """Return the object behind any number of views, or ``ref`` itself."""

    while isinstance(ref, ContractView):
        ref = object.__getattribute__(ref, "_target")
    return ref
