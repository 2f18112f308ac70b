import pytest
from botocore.exceptions import ClientError

from services.email_service import TEMPLATES_DIR, EmailService


class StubSES:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def send_email(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {"MessageId": "abc-123"}


def test_verification_email_contains_code():
    ses = StubSES()
    service = EmailService(client=ses, sender="sender@example.com")

    resp = service.send_verification_email("a@x.com", "482913")

    assert resp["MessageId"] == "abc-123"
    [call] = ses.calls
    assert call["Source"] == "sender@example.com"
    assert call["Destination"] == {"ToAddresses": ["a@x.com"]}
    assert call["Message"]["Subject"]["Data"].endswith("OTP")
    assert "482913" in call["Message"]["Body"]["Text"]["Data"]
    assert "5 minutes" in call["Message"]["Body"]["Text"]["Data"]
    assert "482913" in call["Message"]["Body"]["Html"]["Data"]


def test_plain_send_has_no_html_part():
    ses = StubSES()

    EmailService(client=ses).send("a@x.com", "Hello", "Body")

    assert "Html" not in ses.calls[0]["Message"]["Body"]


def test_client_error_propagates():
    error = ClientError({"Error": {"Code": "MessageRejected", "Message": "nope"}}, "SendEmail")
    service = EmailService(client=StubSES(error=error))

    with pytest.raises(ClientError):
        service.send_verification_email("a@x.com", "482913")


def test_template_ships_inside_services_package():
    assert TEMPLATES_DIR.parent.name == "services"
    assert (TEMPLATES_DIR / "email_verification_code.html.jinja").is_file()
