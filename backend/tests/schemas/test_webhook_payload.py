"""Webhook payload validation — provider bodies parse leniently, ballots strictly.

Invariants:
    - Unknown provider fields are ignored
    - metadata defaults when the provider omits it (user_id None, monthly period)
    - payment id and event must be non-empty
    - option_index must be >= 0
"""

import pytest
from pydantic import ValidationError

from kontekst.schemas.content_vote import BallotCreate
from kontekst.schemas.payment import PaymentWebhook


# --- PaymentWebhook -----------------------------------------------------------

def test_unknown_fields_ignored():
    body = PaymentWebhook.model_validate({
        "type": "notification",
        "event": "payment.succeeded",
        "object": {"id": "p1", "status": "succeeded", "paid": True, "metadata": {"user_id": "u", "extra": 1}},
    })
    assert body.object.metadata.user_id == "u"
    assert body.object.metadata.period == "monthly"


def test_metadata_defaults_when_missing():
    body = PaymentWebhook.model_validate({"event": "payment.canceled", "object": {"id": "p1"}})
    assert body.object.metadata.user_id is None
    assert body.object.status is None


def test_empty_payment_id_rejected():
    with pytest.raises(ValidationError):
        PaymentWebhook.model_validate({"event": "payment.succeeded", "object": {"id": ""}})


def test_missing_object_rejected():
    with pytest.raises(ValidationError):
        PaymentWebhook.model_validate({"event": "payment.succeeded"})


# --- BallotCreate -------------------------------------------------------------

def test_ballot_accepts_zero():
    assert BallotCreate(option_index=0).option_index == 0


def test_ballot_rejects_negative():
    with pytest.raises(ValidationError):
        BallotCreate(option_index=-1)
