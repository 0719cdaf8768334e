"""Error taxonomy shared by the validator, provider adapter and orchestrator.

Every class carries the HTTP status and the caller-facing message so the
orchestrator can normalize any failure into one response shape.
"""


class CheckoutError(Exception):
    """Base class for failures that end a checkout request."""

    status_code = 500
    reason = "internal"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MethodNotAllowedError(CheckoutError):
    status_code = 405
    reason = "method_not_allowed"


class ConfigurationError(CheckoutError):
    """Required server secret is missing; never retried."""

    status_code = 500
    reason = "configuration"


class MalformedRequestError(CheckoutError):
    status_code = 400
    reason = "malformed_request"


class ProviderRejectionError(CheckoutError):
    """The provider answered with an explicit error list or a non-success status."""

    reason = "provider_rejection"

    def __init__(self, message: str, status_code: int = 500, descriptions: list[str] | None = None) -> None:
        super().__init__(message, status_code)
        self.descriptions = descriptions or []


class TransportError(CheckoutError):
    """Network failure or unexpected exception while talking to the provider."""

    status_code = 500
    reason = "transport"

    def __init__(self, detail: str) -> None:
        super().__init__(f"Erro interno do servidor: {detail}")
        self.detail = detail
