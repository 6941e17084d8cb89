from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional
from enum import Enum


PURCHASE_APPROVED_EVENT = "purchase_approved"
MISSING_EMAIL = "sem-email"
UNKNOWN_PRODUCT = "produto-desconhecido"


class PurchaseNotice(BaseModel):
    """Fields extracted from a Cakto webhook body, with sentinels for anything missing"""

    event: Any = None
    secret: Any = None
    customer_email: str = MISSING_EMAIL
    product_name: str = UNKNOWN_PRODUCT


class SecretCheck(str, Enum):
    NOT_CONFIGURED = "not_configured"
    MATCHED = "matched"
    MISMATCHED = "mismatched"


class CaktoWebhookResponse(BaseModel):
    """JSON body returned by the webhook route (unset fields are left out of the response)"""

    model_config = ConfigDict(populate_by_name=True)

    ok: Optional[bool] = None
    message: Optional[str] = None
    skipped: Optional[bool] = None
    email: Optional[str] = None
    product_name: Optional[str] = Field(default=None, alias="productName")
    email_sent: Optional[bool] = Field(default=None, alias="emailSent")

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
