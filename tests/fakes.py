"""Test doubles shared by the test modules."""

from auth.services.auth_service import AuthService
from auth.stores.memory_store import MemoryUserStore, MemoryVerificationStore

JWT_SECRET = "test-secret"


class RecordingEmailService:
    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, str]] = []
        self.fail = fail

    async def send_code_email(self, email: str, code: str, ttl_seconds: int) -> bool:
        self.sent.append((email, code))
        return not self.fail

    def last_code(self, email: str) -> str:
        return [code for to, code in self.sent if to == email][-1]


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class AllowAllRateLimiter:
    async def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        return True


def make_auth_service(**overrides) -> AuthService:
    options = {
        "user_store": MemoryUserStore(),
        "verification_store": MemoryVerificationStore(),
        "email_service": RecordingEmailService(),
        "code_ttl_seconds": 60,
        "max_code_attempts": 5,
        "jwt_secret": JWT_SECRET,
        "bcrypt_rounds": 4,
    }
    options.update(overrides)
    return AuthService(**options)
