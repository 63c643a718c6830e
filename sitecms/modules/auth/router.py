"""Session routes.

Sign-in happens at the identity provider; this service only ends sessions
and reports who is signed in.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from jose import JWTError

from sitecms.config import settings
from sitecms.core.logging import get_logger
from sitecms.core.redis import get_token_blacklist
from sitecms.core.security import (
    AdminPrincipal,
    CurrentAdmin,
    decode_session_token,
    get_session_token,
)
from sitecms.modules.auth.schemas import SessionResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/sign-out",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Sign out",
    description="Revoke the session token, clear the session cookie and redirect.",
)
async def sign_out(token: str | None = Depends(get_session_token)) -> RedirectResponse:
    """Revoke the current token.

    The token id is added to the Redis blacklist with TTL matching its
    remaining lifetime. Missing or unreadable tokens still get the cookie
    cleared and the redirect.
    """
    if token:
        await _revoke(token)

    response = RedirectResponse(
        url=settings.sign_out_redirect_url,
        status_code=status.HTTP_303_SEE_OTHER,
    )
    response.delete_cookie(settings.session_cookie_name)
    return response


async def _revoke(token: str) -> None:
    try:
        principal = AdminPrincipal.from_claims(decode_session_token(token))
    except JWTError as e:
        logger.info("sign_out_token_unreadable", error=str(e))
        return

    if not principal.token_id:
        return

    blacklist = await get_token_blacklist()
    if blacklist:
        await blacklist.add(principal.token_id, principal.expires_in_seconds)
        logger.info("token_revoked", jti=principal.token_id[:8], user_id=principal.user_id)
    else:
        logger.warning("sign_out_blacklist_unavailable", user_id=principal.user_id)


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current admin session",
)
async def get_session(admin: CurrentAdmin) -> SessionResponse:
    return SessionResponse(
        user_id=admin.user_id,
        email=admin.email,
        role=admin.role,
        expires_at=admin.expires_at,
    )
