"""Capability contracts and a delegating host.

A contract is a typing.Protocol: a named set of required methods and
properties with no storage and no behaviour. A DelegatingHost holds at most one
contract-typed delegate, acquired at runtime, and calls one designated
operation on it when triggered.
"""

from __future__ import annotations

from delegate_kit.contracts import (
    AccessMode,
    ContractSpec,
    ContractView,
    MethodRequirement,
    PropertyRequirement,
    combine,
    conforms,
    contract_spec,
    missing_members,
    restrict,
)
from delegate_kit.errors import (
    ConfigError,
    ContractError,
    DelegateKitError,
    ExtensionConflictError,
    ReadOnlyMemberError,
)
from delegate_kit.extension import extend
from delegate_kit.host import DelegatingHost, HostMessages, HostState, TriggerOutcome
from delegate_kit.output import OutputSink, RecordingSink, StreamSink

__all__ = [
    "AccessMode",
    "ConfigError",
    "ContractError",
    "ContractSpec",
    "ContractView",
    "DelegateKitError",
    "DelegatingHost",
    "ExtensionConflictError",
    "HostMessages",
    "HostState",
    "MethodRequirement",
    "OutputSink",
    "PropertyRequirement",
    "ReadOnlyMemberError",
    "RecordingSink",
    "StreamSink",
    "TriggerOutcome",
    "__version__",
    "combine",
    "conforms",
    "contract_spec",
    "extend",
    "missing_members",
    "restrict",
]

__version__ = "0.1.0"
