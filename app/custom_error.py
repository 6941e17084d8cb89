from fastapi import status
from typing import Any, Dict


class WebhookError(Exception):
    """Base error of the webhook route, rendered as JSON by the handler registered in main.py"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, content: Dict[str, Any]):
        super().__init__(content.get("error", "Webhook error"))
        self.content = content


class InvalidWebhookSecretError(WebhookError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__(
            {
                "ok": False,
                "error": "Segredo inválido",
                "detail": "Secret recebido não bate com o configurado no servidor.",
            }
        )


class WebhookMethodNotAllowedError(WebhookError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED

    def __init__(self):
        super().__init__({"error": "Method not allowed"})


class WebhookInternalError(WebhookError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error_detail_message: str):
        super().__init__({"ok": False, "error": "Erro interno no webhook", "details": error_detail_message})
