"""Turn Protocol classes into ContractSpec descriptions.

Contracts are ordinary ``typing.Protocol`` subclasses:

- methods are requirements with signature only,
- ``@property`` without a setter is a read-only property requirement,
- a bare annotation (or a property with a setter) is read-write.

Conformance itself is checked by a static type checker. The helpers here only
describe contracts and answer "what is missing?" for tests and diagnostics.
"""

from __future__ import annotations

import inspect
import types
from functools import lru_cache
from typing import Any, Callable, Generic, Protocol, cast, get_type_hints

from delegate_kit.contracts.model import (
    AccessMode,
    ContractSpec,
    Member,
    MethodRequirement,
    PropertyRequirement,
)
from delegate_kit.errors import ContractError


_NOT_MEMBERS = (object, Protocol, Generic)


def is_contract(obj: object) -> bool:
    # typing marks classes that list Protocol among their direct bases.
    return isinstance(obj, type) and bool(getattr(obj, "_is_protocol", False))


def _require_contract(obj: object) -> type:
    if not is_contract(obj):
        raise ContractError(f"{obj!r} is not a contract (typing.Protocol subclass)")
    return cast(type, obj)


def _hints(obj: Any) -> dict[str, Any]:
    try:
        return get_type_hints(obj)
    except (NameError, TypeError):
        # Unresolvable forward references stay as their source strings.
        return dict(inspect.get_annotations(obj))


def _annotation(value: Any) -> Any:
    return None if value is inspect.Parameter.empty else value


def _method(name: str, func: Callable[..., Any], *, bound: bool) -> MethodRequirement:
    hints = _hints(func)
    sig = inspect.signature(func)
    params = list(sig.parameters.values())
    if bound and params:
        params = params[1:]
    return MethodRequirement(
        name=name,
        parameters=tuple((p.name, hints.get(p.name, _annotation(p.annotation))) for p in params),
        returns=hints.get("return", _annotation(sig.return_annotation)),
    )


def _property(name: str, prop: property) -> PropertyRequirement:
    type_ = None
    if prop.fget is not None:
        type_ = _hints(prop.fget).get("return")
    access = AccessMode.READ_WRITE if prop.fset is not None else AccessMode.READ_ONLY
    return PropertyRequirement(name=name, type=type_, access=access)


def _own_members(base: type) -> dict[str, Member]:
    out: dict[str, Member] = {}
    hints = _hints(base)

    for name, raw in inspect.get_annotations(base).items():
        if name.startswith("_"):
            continue
        out[name] = PropertyRequirement(name=name, type=hints.get(name, raw), access=AccessMode.READ_WRITE)

    for name, value in vars(base).items():
        if name.startswith("_"):
            continue
        if isinstance(value, property):
            out[name] = _property(name, value)
        elif isinstance(value, staticmethod):
            out[name] = _method(name, value.__func__, bound=False)
        elif isinstance(value, classmethod):
            out[name] = _method(name, value.__func__, bound=True)
        elif inspect.isfunction(value):
            out[name] = _method(name, value, bound=True)

    return out


def _contract_bases(contract: type) -> list[type]:
    """Contract classes behind ``contract``: bases first, in declaration order."""

    ordered: list[type] = []

    def visit(cls: type) -> None:
        if cls in _NOT_MEMBERS or cls in ordered or not is_contract(cls):
            return
        for base in cls.__bases__:
            visit(base)
        ordered.append(cls)

    visit(contract)
    return ordered


@lru_cache(maxsize=None)
def contract_spec(contract: type) -> ContractSpec:
    """Describe a contract, including members inherited from Protocol bases.

    Members keep declaration order; bases come before the classes that extend
    them.
    """

    _require_contract(contract)

    members: dict[str, Member] = {}
    for base in _contract_bases(contract):
        members.update(_own_members(base))

    return ContractSpec(name=contract.__qualname__, members=tuple(members.values()))


@lru_cache(maxsize=None)
def combine(*contracts: type, name: str | None = None) -> type:
    """Build the conjunction of several contracts as a new Protocol.

    The result only lists the given contracts as bases; it adds no members,
    storage or behaviour. Equal arguments return the same class. Repeated
    contracts, and contracts another argument already extends, are dropped;
    when a single contract remains it is returned as is.
    """

    if not contracts:
        raise ContractError("combine() needs at least one contract")
    for c in contracts:
        _require_contract(c)

    distinct = list(dict.fromkeys(contracts))
    # Protocol issubclass() needs @runtime_checkable, so compare MROs instead.
    bases = [c for c in distinct if not any(o is not c and c in o.__mro__ for o in distinct)]

    if len(bases) == 1 and name is None:
        return bases[0]

    combined_name = name or "And".join(c.__name__ for c in bases)

    def body(ns: dict[str, Any]) -> None:
        ns["__module__"] = bases[0].__module__

    try:
        return types.new_class(combined_name, (*bases, Protocol), exec_body=body)
    except TypeError as e:
        names = ", ".join(c.__qualname__ for c in bases)
        raise ContractError(f"cannot combine {names}: {e}") from e


def spec_for(*contracts: type) -> ContractSpec:
    return contract_spec(combine(*contracts))


def missing_members(obj: object, *contracts: type) -> list[str]:
    """Names required by the contracts that ``obj`` does not provide."""

    missing: list[str] = []
    for member in spec_for(*contracts).members:
        if isinstance(member, MethodRequirement):
            if not callable(getattr(obj, member.name, None)):
                missing.append(member.name)
        elif not hasattr(obj, member.name):
            missing.append(member.name)
    return missing


def conforms(obj: object, *contracts: type) -> bool:
    return not missing_members(obj, *contracts)
