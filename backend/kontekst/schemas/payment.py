"""Payment Schemas — payment provider webhook body.

Invariants:
    - Unknown fields are ignored: providers add fields without notice
    - metadata.user_id stays a raw string here; the service decides whether it is usable
"""

from pydantic import BaseModel, ConfigDict, Field


class PaymentMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str | None = None
    plan: str = "premium"
    period: str = "monthly"


class PaymentObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    status: str | None = None
    metadata: PaymentMetadata = Field(default_factory=PaymentMetadata)


class PaymentWebhook(BaseModel):
    model_config = ConfigDict(extra="ignore")

    event: str = Field(min_length=1)
    object: PaymentObject


class PaymentWebhookResponse(BaseModel):
    success: bool
    duplicate: bool = False
