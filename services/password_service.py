import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from config import PASSWORD_HASH_TIME_COST

logger = logging.getLogger("jugaad_api.password")


class PasswordService:
    def __init__(self, hasher: PasswordHasher | None = None):
        self.hasher = hasher or PasswordHasher(time_cost=PASSWORD_HASH_TIME_COST)

    def hash(self, password: str) -> str:
        return self.hasher.hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        try:
            return self.hasher.verify(password_hash, password)
        except VerifyMismatchError:
            return False
        except InvalidHash:
            # Stored hash is corrupted (should never happen unless storage corrupted)
            logger.error("Password verification failed due to invalid stored hash")
            return False
        except VerificationError:
            logger.exception("General Argon2 verification error")
            return False
