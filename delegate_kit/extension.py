from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, TypeVar

from delegate_kit.contracts.introspect import contract_spec, is_contract
from delegate_kit.errors import ExtensionConflictError


logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


def _public_members(body: type) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name, value in vars(body).items():
        if name.startswith("_"):
            continue
        if isinstance(value, (property, staticmethod, classmethod)) or inspect.isfunction(value):
            out[name] = value
    return out


def extend(target: T, *, replace: bool = False) -> Callable[[type], T]:
    """Add the members of the decorated class body to ``target``.

    Usage::

        @extend(Temperature)
        class _TemperatureLabel:
            @property
            def label(self) -> str:
                return f"{self.degrees} C"

    After this, ``Temperature`` conforms to any contract that needs ``label``.
    The decorator returns ``target``, not the body class.
    """

    def decorator(body: type) -> T:
        members = _public_members(body)

        if not replace:
            for name in members:
                if hasattr(target, name):
                    raise ExtensionConflictError(target.__qualname__, name)

        for name, value in members.items():
            setattr(target, name, value)

        if is_contract(target):
            # Cached descriptions of this contract and its extensions are stale.
            contract_spec.cache_clear()

        logger.info(
            "extension_applied",
            extra={"target": target.__qualname__, "members": sorted(members)},
        )
        return target

    return decorator
