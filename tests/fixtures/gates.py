"""Admin gate fakes for route tests."""

from sitecms.core.security import AccessDecision, AdminPrincipal

TEST_ADMIN = AdminPrincipal(
    user_id="00000000-0000-0000-0000-000000000002",
    email="admin@example.com",
    role="ADMIN",
    token_id=None,
    expires_at=None,
)


class AllowGate:
    """Gate that admits every caller as TEST_ADMIN."""

    def __init__(self) -> None:
        self.calls = 0

    async def check_admin(self, token: str | None) -> AccessDecision:
        self.calls += 1
        return AccessDecision.allow(TEST_ADMIN)


class DenyGate:
    """Gate that refuses every caller with a fixed reason."""

    def __init__(self, reason: str = "unauthenticated") -> None:
        self.reason = reason
        self.calls = 0

    async def check_admin(self, token: str | None) -> AccessDecision:
        self.calls += 1
        return AccessDecision.deny(self.reason, "Denied by test gate")
