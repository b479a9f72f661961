"""Error types for the provider layer."""

from llmbridge.core.errors import BridgeError


class ProviderError(BridgeError):
    """Base error for provider construction and transport failures."""


class ProviderNotFoundError(ProviderError):
    """No registered provider claims the requested model."""

    def __init__(self, model: str) -> None:
        self.model = model
        super().__init__(f"No registered provider supports model: {model}")


class MessagesApiError(ProviderError):
    """The Messages API answered with an HTTP error status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        msg = f"Messages API returned HTTP {status_code}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
