"""Request Dependencies — authenticated user seam and shared app state.

Invariants:
    - Authentication happens upstream; the gateway forwards the user id in X-User-Id
    - Missing or malformed X-User-Id on a protected endpoint → AuthenticationError (401)
    - optional_user_id never raises: anonymous readers get None
"""

from uuid import UUID

from fastapi import Header, Request

from kontekst.core.errors import AuthenticationError
from kontekst.services.presence import PresenceHub

USER_HEADER = "X-User-Id"


def _parse(raw: str | None) -> UUID | None:
    if not raw:
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


async def current_user_id(
    x_user_id: str | None = Header(default=None, alias=USER_HEADER),
) -> UUID:
    user_id = _parse(x_user_id)
    if user_id is None:
        raise AuthenticationError()
    return user_id


async def optional_user_id(
    x_user_id: str | None = Header(default=None, alias=USER_HEADER),
) -> UUID | None:
    return _parse(x_user_id)


def presence_hub(request: Request) -> PresenceHub:
    return request.app.state.presence_hub
