"""Admin authentication gate.

Sessions are owned by the external identity provider; the service only
verifies the signed access token it hands out and decides whether the
caller holds the admin capability. The gate is injected through
``get_admin_gate`` so route tests can swap in an allow/deny fake.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated, Any, Literal, Protocol

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from sitecms.config import Settings, settings
from sitecms.core.exceptions import AuthenticationError, PermissionDeniedError
from sitecms.core.logging import get_logger
from sitecms.core.redis import get_token_blacklist

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DenialReason = Literal["unauthenticated", "forbidden"]


# ============================================================================
# Session principal
# ============================================================================


@dataclass(frozen=True)
class AdminPrincipal:
    """Claims of a verified session token."""

    user_id: str
    email: str | None
    role: str | None
    token_id: str | None
    expires_at: datetime | None

    @property
    def expires_in_seconds(self) -> int:
        """Remaining token lifetime, used as blacklist TTL."""
        if self.expires_at is None:
            return 0
        remaining = self.expires_at - datetime.now(UTC)
        return max(0, int(remaining.total_seconds()))

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "AdminPrincipal":
        exp = claims.get("exp")
        return cls(
            user_id=str(claims.get("sub", "")),
            email=claims.get("email"),
            role=_role_from_claims(claims),
            token_id=claims.get("jti"),
            expires_at=datetime.fromtimestamp(exp, tz=UTC) if exp else None,
        )


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an admin capability check."""

    allowed: bool
    principal: AdminPrincipal | None = None
    reason: DenialReason | None = None
    message: str | None = None

    @classmethod
    def allow(cls, principal: AdminPrincipal) -> "AccessDecision":
        return cls(allowed=True, principal=principal)

    @classmethod
    def deny(
        cls,
        reason: DenialReason,
        message: str,
        principal: AdminPrincipal | None = None,
    ) -> "AccessDecision":
        return cls(allowed=False, principal=principal, reason=reason, message=message)


def _role_from_claims(claims: dict[str, Any]) -> str | None:
    # app_metadata is provider-controlled, user_metadata is user-editable
    for container in ("app_metadata", "user_metadata"):
        metadata = claims.get(container)
        if isinstance(metadata, dict) and metadata.get("role"):
            return str(metadata["role"])
    role = claims.get("role")
    return str(role) if role else None


# ============================================================================
# Gate
# ============================================================================


class AdminGate(Protocol):
    """Single capability check consumed by every admin endpoint."""

    async def check_admin(self, token: str | None) -> AccessDecision: ...


def decode_session_token(token: str, config: Settings = settings) -> dict[str, Any]:
    """Verify signature, expiry and audience of a session token.

    Raises:
        ExpiredSignatureError: If the token has expired
        JWTError: If the token is malformed or the signature is invalid
    """
    options = {"verify_aud": config.auth_jwt_audience is not None}
    return jwt.decode(
        token,
        config.auth_jwt_secret,
        algorithms=[config.auth_jwt_algorithm],
        audience=config.auth_jwt_audience,
        options=options,
    )


class JWTAdminGate:
    """Admin gate backed by identity-provider JWTs and the Redis blacklist."""

    def __init__(self, config: Settings = settings) -> None:
        self.config = config

    async def check_admin(self, token: str | None) -> AccessDecision:
        if not token:
            return AccessDecision.deny("unauthenticated", "Authorization required")

        try:
            claims = decode_session_token(token, self.config)
        except ExpiredSignatureError:
            return AccessDecision.deny("unauthenticated", "Session has expired")
        except JWTError:
            return AccessDecision.deny("unauthenticated", "Invalid session token")

        principal = AdminPrincipal.from_claims(claims)

        if principal.token_id:
            blacklist = await get_token_blacklist()
            if blacklist and await blacklist.is_blacklisted(principal.token_id):
                return AccessDecision.deny("unauthenticated", "Session has been signed out")

        if not principal.role or principal.role.upper() not in self.config.admin_roles:
            return AccessDecision.deny("forbidden", "Admin access required", principal)

        return AccessDecision.allow(principal)


_default_gate = JWTAdminGate()


def get_admin_gate() -> AdminGate:
    """FastAPI dependency returning the configured gate."""
    return _default_gate


# ============================================================================
# FastAPI Dependencies
# ============================================================================


def get_session_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Bearer token from the Authorization header, else the session cookie."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


async def require_admin(
    token: str | None = Depends(get_session_token),
    gate: AdminGate = Depends(get_admin_gate),
) -> AdminPrincipal:
    """Dependency that short-circuits the request unless the caller is admin.

    Usage:
        @router.post("/admin/site-logo", dependencies=[Depends(require_admin)])
        async def create_logo(...):
            ...
    """
    decision = await gate.check_admin(token)

    if decision.allowed and decision.principal is not None:
        return decision.principal

    logger.warning("admin_access_denied", reason=decision.reason)

    if decision.reason == "forbidden":
        role = decision.principal.role if decision.principal else None
        raise PermissionDeniedError(decision.message or "Admin access required", role=role)

    raise AuthenticationError(decision.message or "Authentication required")


CurrentAdmin = Annotated[AdminPrincipal, Depends(require_admin)]
