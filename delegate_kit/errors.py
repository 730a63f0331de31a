from __future__ import annotations


class DelegateKitError(Exception):
    """Base exception for this project."""


class ConfigError(DelegateKitError):
    """Raised when configuration is invalid or incomplete."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class ContractError(DelegateKitError):
    """Raised when something that should be a contract is not usable as one."""


class ReadOnlyMemberError(DelegateKitError, AttributeError):
    """Raised on a write to a member a contract declares read-only."""

    def __init__(self, contract: str, member: str):
        super().__init__(f"{member!r} is read-only in contract {contract}")
        self.contract = contract
        self.member = member


class ExtensionConflictError(DelegateKitError):
    """Raised when an extension would silently replace an existing member."""

    def __init__(self, target: str, member: str):
        super().__init__(f"{target} already defines {member!r}; pass replace=True to override")
        self.target = target
        self.member = member
