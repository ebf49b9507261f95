from enum import Enum


class ContactTestConstants(Enum):
    MOCK_CLIENT_IP = "203.0.113.7"
    MOCK_VERIFICATION_TOKEN = "tok123"
    MOCK_MESSAGE_ID = "49a3999c-0ce1-4ea6-ab68-afcd6dc2e794"
    CONTACT_URL = "/functions/v1/send-contact-email"


VALID_SUBMISSION = {
    "name": "Ava",
    "email": "ava@example.com",
    "subject": "Hi",
    "message": "1234567890",
    "verificationToken": ContactTestConstants.MOCK_VERIFICATION_TOKEN.value,
}


def submission_with(**overrides):
    """Copy of the valid submission with some fields replaced or removed (None)."""
    data = {**VALID_SUBMISSION, **overrides}
    return {key: value for key, value in data.items() if value is not None}
