"""Shared error types for the conversion core."""


class BridgeError(Exception):
    """Base error for all llmbridge failures."""


class ConversionError(BridgeError):
    """A framework request could not be converted to a vendor request."""


class UnsupportedRoleError(ConversionError):
    """A turn carries a role the target dialect has no mapping for."""

    def __init__(self, role: str | None) -> None:
        self.role = role
        super().__init__(f"Unsupported turn role: {role!r}")
