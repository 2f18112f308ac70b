import logging
from contextlib import contextmanager

from botocore.exceptions import BotoCoreError, ClientError
from jinja2 import TemplateError
from sqlalchemy.exc import SQLAlchemyError

from errors import (
    ConflictError,
    CredentialError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from models import (
    AccountMessageResponse,
    LoginRequest,
    MessageResponse,
    ProfileRequest,
    ProfileResponse,
    ResetPasswordRequest,
    SendOTPRequest,
    SignupRequest,
    StatsResponse,
)
from services.email_service import EmailService
from services.otp_service import OTPRegistry
from services.password_service import PasswordService
from services.profile_service import to_profile_columns, to_profile_view
from services.user_store import UserStore

logger = logging.getLogger("jugaad_api.account")

INVALID_OTP = "Invalid or expired OTP"


def normalize_email(email: str) -> str:
    email = email.lower().strip()
    if "@" not in email:
        logger.warning(f"Rejected request due to invalid email format: {email}")
        raise ValidationError("Invalid email")
    return email


@contextmanager
def dependency_guard(message: str):
    """Translate storage and email failures into a generic DependencyError."""
    try:
        yield
    except (SQLAlchemyError, ClientError, BotoCoreError, TemplateError) as e:
        logger.exception(message)
        raise DependencyError(message) from e


class AccountService:
    """
    Credential and profile workflows.

    Signup and password reset are gated on the OTP registry; login is
    password-only. Each workflow mutates storage at most once, after every
    check has passed.
    """

    def __init__(
        self,
        registry: OTPRegistry,
        store: UserStore,
        passwords: PasswordService,
        mailer: EmailService,
    ):
        self.registry = registry
        self.store = store
        self.passwords = passwords
        self.mailer = mailer

    def issue_otp(self, request: SendOTPRequest) -> MessageResponse:
        if not request.email:
            raise ValidationError("Email is required for OTP")
        email = normalize_email(request.email)

        otp = self.registry.issue(email)

        with dependency_guard("Failed to send email OTP"):
            self.mailer.send_verification_email(email, otp)

        logger.info(f"Email OTP sent to {email}")
        return MessageResponse(message="OTP sent to your email")

    def signup(self, request: SignupRequest) -> AccountMessageResponse:
        if not request.email or not request.password or not request.otp:
            raise ValidationError("Email, password and OTP are required")
        email = normalize_email(request.email)

        if not self.registry.verify_and_consume(email, request.otp):
            raise CredentialError(INVALID_OTP)

        with dependency_guard("Server error during signup"):
            if self.store.get_by_email(email) is not None:
                raise ConflictError("User already exists, please login")

            password_hash = self.passwords.hash(request.password)
            user = self.store.create(email, password_hash)

        logger.info(f"New signup: id={user.id}, email={user.email}")
        return AccountMessageResponse(message="Signup successful", email=user.email)

    def login(self, request: LoginRequest) -> AccountMessageResponse:
        if not request.email or not request.password:
            raise ValidationError("Email and password are required")
        email = normalize_email(request.email)

        with dependency_guard("Server error during login"):
            user = self.store.get_by_email(email)
            if user is None:
                raise NotFoundError("User not found, please sign up")

            if not self.passwords.verify(user.password_hash, request.password):
                logger.warning(f"Login failed: invalid password for email={email}")
                raise CredentialError("Invalid password")

            self.store.record_login_event(user.id)

        logger.info(f"Login successful for email={email}")
        return AccountMessageResponse(message="Login successful", email=user.email)

    def reset_password(self, request: ResetPasswordRequest) -> MessageResponse:
        if not request.email or not request.otp or not request.newPassword:
            raise ValidationError("Email, OTP and new password are required")
        email = normalize_email(request.email)

        if not self.registry.verify_and_consume(email, request.otp):
            raise CredentialError(INVALID_OTP)

        with dependency_guard("Server error during reset"):
            user = self.store.get_by_email(email)
            if user is None:
                raise NotFoundError("User not found")

            new_hash = self.passwords.hash(request.newPassword)
            self.store.update_password_hash(user.id, new_hash)

        logger.info(f"Password reset for email={email}")
        return MessageResponse(message="Password reset successful")

    def get_profile(self, email: str | None) -> ProfileResponse:
        if not email:
            raise ValidationError("Email is required")
        email = normalize_email(email)

        with dependency_guard("Server error fetching user"):
            user = self.store.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")

        return ProfileResponse(user=to_profile_view(user))

    def save_profile(self, request: ProfileRequest) -> AccountMessageResponse:
        if not request.email:
            raise ValidationError("Email is required")
        email = normalize_email(request.email)

        columns = to_profile_columns(request)

        with dependency_guard("Server error saving profile"):
            user = self.store.get_by_email(email)
            if user is None:
                raise NotFoundError("User not found")

            self.store.update_profile(user.id, columns)

        logger.info(f"Updated profile for: {email}, tags: {columns['work_tags']}")
        return AccountMessageResponse(message="Profile saved", email=email)

    def get_stats(self) -> StatsResponse:
        with dependency_guard("Stats error"):
            counts = self.store.stats()

        return StatsResponse(
            totalUsers=counts["total"],
            helpers=counts["helpers"],
            hirers=counts["hirers"],
            readyToServe=counts["with_role"],
        )
