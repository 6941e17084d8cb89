from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.routes.cakto_webhook_routes import cakto_webhook_router, CORS_HEADERS, WEBHOOK_PATH
from app.configs.app_settings import settings
from app.custom_error import WebhookError, WebhookMethodNotAllowedError


app = FastAPI(title="Cakto Webhook API", version="1.0.0")


# Global Exception Handler for the webhook errors (401, 405, 500), so each of them becomes a single JSON response
# with the same CORS headers as the successful ones.
@app.exception_handler(WebhookError)
async def webhook_error_exception_handler(request: Request, exc: WebhookError):
    """Render webhook errors as JSON"""
    return JSONResponse(status_code=exc.status_code, content=exc.content, headers=CORS_HEADERS)


# Starlette's router answers methods the webhook route does not list (TRACE, PROPFIND, ...) with its own 405,
# this turns it into the webhook's 405 body. Everything else keeps FastAPI's default rendering.
@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405 and request.url.path == f"{settings.API_PREFIX}{WEBHOOK_PATH}":
        error = WebhookMethodNotAllowedError()
        headers = {**(exc.headers or {}), **CORS_HEADERS}
        return JSONResponse(status_code=error.status_code, content=error.content, headers=headers)

    return await http_exception_handler(request, exc)


# Include routers
app.include_router(cakto_webhook_router, prefix=settings.API_PREFIX)
