"""First checkout stage: reject bad method, missing secret and malformed bodies."""

from pydantic import ValidationError

from paylink.common.config import CheckoutConfig
from paylink.common.errors import ConfigurationError, MalformedRequestError, MethodNotAllowedError
from paylink.common.logging import logger
from paylink.services.checkout.schemas import CheckoutRequest


ALLOWED_METHOD = "POST"


def validate_request(method: str | None, raw_body: str | bytes | None, config: CheckoutConfig) -> CheckoutRequest:
    """Return the parsed request or raise the matching `CheckoutError`.

    Checks run in a fixed order: method, then credential, then body. The body
    is never looked at when an earlier check fails.
    """

    if (method or "").upper() != ALLOWED_METHOD:
        raise MethodNotAllowedError("Método não permitido.")

    if not config.api_key:
        logger.error("ASAAS_API_KEY missing from environment")
        raise ConfigurationError("Erro de configuração do servidor: Chave Asaas não encontrada.")

    if not raw_body:
        raise MalformedRequestError("JSON inválido no corpo da requisição.")
    try:
        return CheckoutRequest.model_validate_json(raw_body)
    except ValidationError as exc:
        logger.warning("malformed checkout body errors=%s", exc.error_count())
        raise MalformedRequestError("JSON inválido no corpo da requisição.") from exc
