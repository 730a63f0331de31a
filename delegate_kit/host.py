from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from delegate_kit.contracts.introspect import contract_spec
from delegate_kit.contracts.model import MethodRequirement
from delegate_kit.contracts.view import ContractView, unwrap
from delegate_kit.errors import ContractError
from delegate_kit.output import OutputSink, StreamSink


logger = logging.getLogger(__name__)

C = TypeVar("C")


class HostState(str, Enum):
    UNASSIGNED = "unassigned"
    ASSIGNED = "assigned"


class TriggerOutcome(str, Enum):
    FALLBACK = "fallback"
    HANDLED = "handled"
    DECLINED = "declined"


@dataclass(frozen=True, slots=True)
class HostMessages:
    fallback: str = "no handler"
    handled: str = "handled"
    declined: str = "declined"


class DelegatingHost(Generic[C]):
    """Holds at most one contract-typed delegate and calls it on trigger().

    The host only knows the contract. Which concrete type fills the slot is
    decided at runtime through acquire(); static conformance is left to the
    type checker, so acquire() does not validate its argument.
    """

    def __init__(
        self,
        contract: type[C],
        operation: str,
        *,
        sink: OutputSink | None = None,
        messages: HostMessages | None = None,
        restrict: bool = False,
    ) -> None:
        spec = contract_spec(contract)
        member = spec.get(operation)
        if not isinstance(member, MethodRequirement):
            raise ContractError(f"{operation!r} is not a method of contract {spec.name}")

        self._contract = contract
        self._operation = operation
        self._sink: OutputSink = sink if sink is not None else StreamSink()
        self._messages = messages or HostMessages()
        self._restrict = restrict
        self._delegate: C | None = None

    @property
    def contract(self) -> type[C]:
        return self._contract

    @property
    def operation(self) -> str:
        return self._operation

    @property
    def delegate(self) -> C | None:
        return self._delegate

    @property
    def state(self) -> HostState:
        return HostState.UNASSIGNED if self._delegate is None else HostState.ASSIGNED

    def acquire(self, conformer: C) -> None:
        """Store ``conformer``, replacing any previous delegate."""

        previous = self._delegate
        if self._restrict:
            # An already narrowed view stays narrowed: wrap it, do not unwrap it.
            self._delegate = ContractView(conformer, self._contract)  # type: ignore[assignment]
        else:
            self._delegate = conformer

        logger.info(
            "delegate_acquired",
            extra={
                "contract": self._contract.__qualname__,
                "conformer": type(unwrap(conformer)).__qualname__,
                "replaced": previous is not None,
            },
        )

    def clear(self) -> None:
        if self._delegate is not None:
            logger.info("delegate_cleared", extra={"contract": self._contract.__qualname__})
        self._delegate = None

    def trigger(self, *args: Any, **kwargs: Any) -> TriggerOutcome:
        """Run the designated operation on the delegate, or the fallback."""

        delegate = self._delegate
        if delegate is None:
            logger.debug("trigger_fallback", extra={"contract": self._contract.__qualname__})
            self._sink.write_line(self._messages.fallback)
            return TriggerOutcome.FALLBACK

        result = getattr(delegate, self._operation)(*args, **kwargs)
        outcome = TriggerOutcome.HANDLED if result else TriggerOutcome.DECLINED

        logger.debug(
            "trigger_dispatched",
            extra={
                "contract": self._contract.__qualname__,
                "operation": self._operation,
                "outcome": outcome.value,
            },
        )

        if outcome is TriggerOutcome.HANDLED:
            self._sink.write_line(self._messages.handled)
        else:
            self._sink.write_line(self._messages.declined)
        return outcome
