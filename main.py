import os
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi_utilities import repeat_every

from config import CORS_ORIGINS, DEBUG, EXPIRED_OTP_CLEANUP_INTERVAL_SECONDS, STATIC_DIR
from database import init_db
from errors import AccountError
from models import (
    AccountMessageResponse,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    ProfileRequest,
    ProfileResponse,
    ResetPasswordRequest,
    SendOTPRequest,
    SignupRequest,
    StatsResponse,
)
from services.account_service import AccountService
from services.email_service import EmailService
from services.logs_service import logger
from services.otp_service import OTPRegistry
from services.password_service import PasswordService
from services.user_store import UserStore

# OTP state lives in this process only
otp_registry = OTPRegistry()
account_service = AccountService(
    registry=otp_registry,
    store=UserStore(),
    passwords=PasswordService(),
    mailer=EmailService(),
)


def get_account_service() -> AccountService:
    return account_service


# cron job to clean up expired OTPs
@repeat_every(seconds=EXPIRED_OTP_CLEANUP_INTERVAL_SECONDS)
def clear_expired_otps():
    removed = otp_registry.purge_expired()
    if removed:
        logger.info(f"Expired OTP cleanup removed {removed} entries")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up... Initializing database.")
    init_db()
    logger.info("Database initialized.")
    await clear_expired_otps()
    yield


app = FastAPI(
    title="Jugaad Account API",
    description="Email OTP signup, login, password reset and user profiles",
    version="0.1.0",
    debug=DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AccountError)
async def account_error_handler(request: Request, exc: AccountError):
    if exc.http_status >= 500:
        logger.error(f"{exc.kind} error on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.kind} error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"kind": "validation", "message": "Invalid request data"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"kind": "internal", "message": "An unexpected error occurred"},
    )


router = APIRouter(prefix="/api")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing fields, invalid OTP or password, or existing account"},
    404: {"model": ErrorResponse, "description": "No account exists for the email"},
    500: {"model": ErrorResponse, "description": "Storage or email transport failure"},
}


# Auth Routes
@router.post(
    "/send-otp",
    response_model=MessageResponse,
    tags=["Authentication"],
    summary="Send OTP to email",
    description="Issue a 6-digit one-time passcode for the email and send it by email. "
    "Any code previously issued for the same email is replaced.",
    responses=ERROR_RESPONSES,
)
def send_otp(
    request: SendOTPRequest,
    service: AccountService = Depends(get_account_service),
):
    return service.issue_otp(request)


@router.post(
    "/signup",
    response_model=AccountMessageResponse,
    tags=["Authentication"],
    summary="Create account",
    description="Create an account from email, password and a valid OTP. The OTP is consumed.",
    responses=ERROR_RESPONSES,
)
def signup(
    request: SignupRequest,
    service: AccountService = Depends(get_account_service),
):
    return service.signup(request)


@router.post(
    "/login",
    response_model=AccountMessageResponse,
    tags=["Authentication"],
    summary="Log in",
    description="Check email and password and record a login event.",
    responses=ERROR_RESPONSES,
)
def login(
    request: LoginRequest,
    service: AccountService = Depends(get_account_service),
):
    return service.login(request)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    tags=["Authentication"],
    summary="Reset password",
    description="Replace the password of an account, gated on a valid OTP.",
    responses=ERROR_RESPONSES,
)
def reset_password(
    request: ResetPasswordRequest,
    service: AccountService = Depends(get_account_service),
):
    return service.reset_password(request)


# Profile Routes
@router.get(
    "/user",
    response_model=ProfileResponse,
    tags=["Profile"],
    summary="Get profile",
    description="Return the stored profile for an email. Missing fields are returned as empty strings.",
    responses=ERROR_RESPONSES,
)
def get_user(
    email: str | None = None,
    service: AccountService = Depends(get_account_service),
):
    return service.get_profile(email)


@router.post(
    "/profile",
    response_model=AccountMessageResponse,
    tags=["Profile"],
    summary="Save profile",
    description="Overwrite the profile fields of an account. Omitted fields are cleared.",
    responses=ERROR_RESPONSES,
)
def save_profile(
    request: ProfileRequest,
    service: AccountService = Depends(get_account_service),
):
    return service.save_profile(request)


@router.get(
    "/stats",
    response_model=StatsResponse,
    tags=["Stats"],
    summary="Get user statistics",
    description="Counts of users, helpers, hirers and users who picked a role.",
    responses={500: ERROR_RESPONSES[500]},
)
def get_stats(service: AccountService = Depends(get_account_service)):
    return service.get_stats()


# Include router in the app
app.include_router(router)

if os.path.isdir(STATIC_DIR):
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")


def main():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
