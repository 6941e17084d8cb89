import hmac
import json
import logging
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool

from app.configs.app_settings import Settings
from app.models.cakto_webhook_models import (
    MISSING_EMAIL,
    PURCHASE_APPROVED_EVENT,
    UNKNOWN_PRODUCT,
    CaktoWebhookResponse,
    PurchaseNotice,
    SecretCheck,
)
from app.models.email_models import EmailSendResult
from app.services.email_services import EmailNotifier, build_access_email

logger = logging.getLogger(__name__)


def parse_webhook_body(raw_body: bytes) -> dict:
    """Decode the JSON body sent by Cakto. Anything that is not a JSON object is treated as an empty body."""
    if not raw_body:
        return {}

    try:
        body = json.loads(raw_body)
    except ValueError:
        logger.warning("⚠️ Webhook body is not valid JSON, treating it as empty")
        return {}

    return body if isinstance(body, dict) else {}


def _nested_str(mapping: Any, *keys: str) -> Optional[str]:
    # walk mapping[k1][k2]... returning None as soon as a level is missing or not a dict
    value = mapping
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value if isinstance(value, str) and value else None


def extract_purchase_notice(body: dict) -> PurchaseNotice:
    return PurchaseNotice(
        event=body.get("event"),
        secret=body.get("secret"),
        customer_email=_nested_str(body, "data", "customer", "email") or MISSING_EMAIL,
        product_name=_nested_str(body, "data", "product", "name") or UNKNOWN_PRODUCT,
    )


def check_secret(provided_secret: Any, expected_secret: Optional[str]) -> SecretCheck:
    if not expected_secret:
        return SecretCheck.NOT_CONFIGURED

    if not isinstance(provided_secret, str):
        return SecretCheck.MISMATCHED

    if hmac.compare_digest(provided_secret.encode("utf-8"), expected_secret.encode("utf-8")):
        return SecretCheck.MATCHED

    return SecretCheck.MISMATCHED


def _event_label(event: Any) -> str:
    # Cakto reads these messages, so values are written the way its JSON payloads spell them
    if event is None:
        return "undefined"
    if isinstance(event, bool):
        return "true" if event else "false"
    return str(event)


def skipped_event_response(event: Any) -> CaktoWebhookResponse:
    return CaktoWebhookResponse(ok=True, skipped=True, message=f"Evento ignorado: {_event_label(event)} (não é {PURCHASE_APPROVED_EVENT})")


class CaktoWebhookService:
    def __init__(self, settings: Settings, notifier: EmailNotifier):
        self.settings = settings
        self.notifier = notifier

    def verify_secret(self, notice: PurchaseNotice) -> SecretCheck:
        result = check_secret(notice.secret, self.settings.CAKTO_WEBHOOK_SECRET)

        if result is SecretCheck.NOT_CONFIGURED:
            logger.warning("⚠️ CAKTO_WEBHOOK_SECRET not configured, accepting webhook without secret check")
        elif result is SecretCheck.MISMATCHED:
            logger.warning(f"🚫 Webhook rejected: invalid secret for event {notice.event}")

        return result

    async def send_access_email(self, notice: PurchaseNotice) -> EmailSendResult:
        """Best-effort delivery: every failure ends up in the returned result"""

        email = build_access_email(notice.customer_email, notice.product_name)

        try:
            result = await run_in_threadpool(self.notifier.send, email.recipient, email.subject, email.text_body, email.html_body)
        except Exception as e:
            result = EmailSendResult.failure(str(e) or type(e).__name__)

        if not result.sent:
            logger.warning(f"⚠️ Failed to send access email to {notice.customer_email}: {result.error}")

        return result

    async def handle_purchase_approved(self, notice: PurchaseNotice) -> CaktoWebhookResponse:
        """Handle purchase_approved event"""

        email_result = await self.send_access_email(notice)

        logger.info(f"✅ Purchase approved processed: {notice.product_name} for {notice.customer_email} (email sent: {email_result.sent})")
        return CaktoWebhookResponse(
            ok=True,
            message="Webhook processado com sucesso",
            email=notice.customer_email,
            product_name=notice.product_name,
            email_sent=email_result.sent,
        )
