import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable

from config import OTP_LIFETIME_MINUTES
from otpmodel.otp_model import OTPEntry

logger = logging.getLogger("jugaad_api.otp")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


OTP_LENGTH = 6


def generate_otp() -> str:
    """Uniformly random 6-digit code in 100000-999999."""
    low = 10 ** (OTP_LENGTH - 1)
    return str(low + secrets.randbelow(9 * low))


class InMemoryOTPStore:
    """Process-local mapping of email -> OTPEntry.

    All operations hold one lock, so consume() is an atomic compare-and-delete.
    """

    def __init__(self):
        self._entries: dict[str, OTPEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, email: str) -> OTPEntry | None:
        with self._lock:
            return self._entries.get(email)

    def put(self, entry: OTPEntry) -> None:
        with self._lock:
            self._entries[entry.email] = entry

    def consume(self, email: str, code: str, now: datetime) -> bool:
        with self._lock:
            entry = self._entries.get(email)
            if entry is None:
                return False
            if entry.is_expired(now):
                return False
            if not secrets.compare_digest(entry.code.encode(), code.encode()):
                return False
            del self._entries[email]
            return True

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [email for email, entry in self._entries.items() if entry.is_expired(now)]
            for email in expired:
                del self._entries[email]
            return len(expired)


class OTPRegistry:
    def __init__(
        self,
        store: InMemoryOTPStore | None = None,
        lifetime: timedelta = timedelta(minutes=OTP_LIFETIME_MINUTES),
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store if store is not None else InMemoryOTPStore()
        self.lifetime = lifetime
        self.clock = clock

    def issue(self, email: str) -> str:
        """Store a fresh code for email, replacing any pending one, and return it."""
        code = generate_otp()
        self.store.put(OTPEntry(email=email, code=code, expires_at=self.clock() + self.lifetime))
        logger.info(f"OTP issued for email={email}")
        return code

    def verify_and_consume(self, email: str, submitted_otp: str) -> bool:
        """
        Check the submitted code against the pending entry for email.

        On success the entry is deleted. A missing entry, a wrong code or an
        expired entry all return False and leave the store untouched.
        """
        if not isinstance(submitted_otp, str):
            return False

        if self.store.consume(email, submitted_otp, self.clock()):
            logger.info(f"OTP verified for email={email}")
            return True

        logger.warning(f"OTP verification failed for email={email}")
        return False

    def purge_expired(self) -> int:
        return self.store.purge_expired(self.clock())
