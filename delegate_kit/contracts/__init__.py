"""Capability contracts.

- Contracts are typing.Protocol classes (no storage, no default behaviour)
- Conjunction of unrelated contracts via combine()
- ContractView: a runtime reference that exposes only contract members
"""

from __future__ import annotations

from delegate_kit.contracts.introspect import (
    combine,
    conforms,
    contract_spec,
    is_contract,
    missing_members,
    spec_for,
)
from delegate_kit.contracts.model import AccessMode, ContractSpec, MethodRequirement, PropertyRequirement
from delegate_kit.contracts.view import ContractView, contract_of, restrict, unwrap

__all__ = [
    "AccessMode",
    "ContractSpec",
    "ContractView",
    "MethodRequirement",
    "PropertyRequirement",
    "combine",
    "conforms",
    "contract_of",
    "contract_spec",
    "is_contract",
    "missing_members",
    "restrict",
    "spec_for",
    "unwrap",
]
