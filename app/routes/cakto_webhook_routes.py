from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
import logging

from app.configs.app_settings import Settings, get_settings
from app.custom_error import InvalidWebhookSecretError, WebhookError, WebhookInternalError, WebhookMethodNotAllowedError
from app.models.cakto_webhook_models import PURCHASE_APPROVED_EVENT, CaktoWebhookResponse, SecretCheck
from app.services.cakto_webhook_services import (
    CaktoWebhookService,
    extract_purchase_notice,
    parse_webhook_body,
    skipped_event_response,
)
from app.services.email_services import EmailNotifier, create_email_notifier

logger = logging.getLogger(__name__)

cakto_webhook_router = APIRouter(tags=["Webhooks"])

# Cakto and browsers call this route from other origins, every response (errors included) carries these
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

WEBHOOK_PATH = "/cakto-webhook"

# methods outside this list get the same 405 body from the HTTPException handler in main.py
WEBHOOK_METHODS = ["GET", "POST", "OPTIONS", "PUT", "PATCH", "DELETE", "HEAD"]


def get_email_notifier(settings: Settings = Depends(get_settings)) -> EmailNotifier:
    """Dependency to get the configured email notifier"""
    return create_email_notifier(settings)


def get_cakto_webhook_service(
    settings: Settings = Depends(get_settings), notifier: EmailNotifier = Depends(get_email_notifier)
) -> CaktoWebhookService:
    """Dependency to get CaktoWebhookService instance"""
    return CaktoWebhookService(settings, notifier)


def webhook_json_response(response: CaktoWebhookResponse, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=response.to_content(), headers=CORS_HEADERS)


# ################################################################################################################################


@cakto_webhook_router.api_route(WEBHOOK_PATH, methods=WEBHOOK_METHODS)
async def cakto_webhook_handler(request: Request, webhook_service: CaktoWebhookService = Depends(get_cakto_webhook_service)):
    """Handle Cakto purchase webhooks"""

    # preflight sent by browsers before the real POST
    if request.method == "OPTIONS":
        return webhook_json_response(CaktoWebhookResponse(ok=True))

    # health check / manual test from the browser
    if request.method == "GET":
        return webhook_json_response(CaktoWebhookResponse(ok=True, message="Webhook ativo e pronto para receber POST da Cakto 🚀"))

    if request.method != "POST":
        raise WebhookMethodNotAllowedError()

    try:
        body = parse_webhook_body(await request.body())
        notice = extract_purchase_notice(body)

        if webhook_service.verify_secret(notice) is SecretCheck.MISMATCHED:
            raise InvalidWebhookSecretError()

        logger.info(f"🔔 Received Cakto webhook: {notice.event}")

        # only approved purchases are processed, the rest is acknowledged so Cakto does not retry
        if notice.event != PURCHASE_APPROVED_EVENT:
            logger.info(f"⚠️ Ignored webhook event type: {notice.event}")
            return webhook_json_response(skipped_event_response(notice.event))

        response = await webhook_service.handle_purchase_approved(notice)
        return webhook_json_response(response)

    except WebhookError:
        raise
    except Exception as e:
        logger.exception(f"🔥 Unexpected webhook error: {str(e)}")
        raise WebhookInternalError(str(e) or type(e).__name__)
