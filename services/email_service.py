import logging
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import (
    APP_NAME,
    AWS_ACCESS_KEY,
    AWS_REGION,
    AWS_SECRET_ACCESS_KEY,
    AWS_SES_SENDER_EMAIL,
    OTP_LIFETIME_MINUTES,
)

logger = logging.getLogger("jugaad_api.email")

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Set up Jinja env
env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html", "xml"]),
)


def create_ses_client():
    return boto3.client(
        "ses",
        region_name=AWS_REGION,
        aws_access_key_id=str(AWS_ACCESS_KEY) or None,
        aws_secret_access_key=str(AWS_SECRET_ACCESS_KEY) or None,
    )


class EmailService:
    def __init__(self, client=None, sender: str = AWS_SES_SENDER_EMAIL):
        self._client = client
        self.sender = sender

    @property
    def client(self):
        if self._client is None:
            self._client = create_ses_client()
        return self._client

    def send(self, to: str, subject: str, text: str, html: str | None = None) -> dict:
        body = {"Text": {"Data": text}}
        if html is not None:
            body["Html"] = {"Data": html}

        try:
            resp = self.client.send_email(
                Source=self.sender,
                Destination={"ToAddresses": [to]},
                Message={
                    "Subject": {"Data": subject},
                    "Body": body,
                },
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            logger.exception(f"SES ClientError ({code}) when sending email to {to}")
            raise
        except BotoCoreError:
            logger.exception(f"SES transport error when sending email to {to}")
            raise

        logger.info(f"Email sent: {to}, Message ID: {resp.get('MessageId')}")
        return resp

    def send_verification_email(self, email: str, otp: str) -> dict:
        # Render Jinja email template
        template = env.get_template("email_verification_code.html.jinja")
        html_body = template.render(app_name=APP_NAME, otp=otp, lifetime=OTP_LIFETIME_MINUTES)

        text_body = (
            f"Your {APP_NAME} verification code is {otp}. "
            f"It is valid for {OTP_LIFETIME_MINUTES} minutes."
        )
        return self.send(email, f"Your {APP_NAME} OTP", text_body, html_body)
