import os

from starlette.config import Config
from starlette.datastructures import CommaSeparatedStrings, Secret

# If APP_CONFIG is set, use that as the path to the .env file, or default to .env
env_file = os.getenv("APP_CONFIG", ".env")
if "APP_CONFIG" in os.environ and not os.path.isfile(env_file):
    raise FileNotFoundError(f"The configuration file specified in APP_CONFIG or the default .env does not exist: {env_file}")

config = Config(env_file)

# Application Configuration
APP_NAME: str = config("APP_NAME", default="Jugaad")
CORS_ORIGINS: CommaSeparatedStrings = config(
    "CORS_ORIGINS", cast=CommaSeparatedStrings, default=CommaSeparatedStrings([])
)
DEBUG: bool = config("DEBUG", cast=bool, default=False)
STATIC_DIR: str = config("STATIC_DIR", default="public")

# AWS SES Configuration
AWS_REGION: str = config("AWS_REGION", default="us-east-2")
AWS_ACCESS_KEY: Secret = config("AWS_ACCESS_KEY", cast=Secret, default="")
AWS_SECRET_ACCESS_KEY: Secret = config("AWS_SECRET_ACCESS_KEY", cast=Secret, default="")
AWS_SES_SENDER_EMAIL: str = config("AWS_SES_SENDER_EMAIL", default="no-reply@jugaad.app")

# OTP Configuration
OTP_LIFETIME_MINUTES: int = config("OTP_LIFETIME_MINUTES", cast=int, default=5)

# Password hashing (argon2 work factor)
PASSWORD_HASH_TIME_COST: int = config("PASSWORD_HASH_TIME_COST", cast=int, default=3)

# Database Configuration
DATABASE_URL: str = config("DATABASE_URL", default="sqlite:///./jugaad.db")

# Cron Job Configuration
EXPIRED_OTP_CLEANUP_INTERVAL_SECONDS: int = config(
    "EXPIRED_OTP_CLEANUP_INTERVAL_SECONDS", cast=int, default=60
)
