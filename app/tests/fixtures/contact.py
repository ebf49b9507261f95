import pytest
from unittest.mock import AsyncMock

from app.services.rate_limit_service import contact_rate_limiter, InMemoryRateLimitStore
from app.tests.constants.contact import ContactTestConstants


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_760_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="function")
def fake_clock():
    """Fixture providing a controllable clock."""
    return FakeClock()


@pytest.fixture(scope="function", autouse=True)
def fresh_rate_limiter(mocker, fake_clock):
    """Give every test an empty in-memory store driven by the fake clock."""
    store = InMemoryRateLimitStore(clock=fake_clock)
    mocker.patch.object(contact_rate_limiter, "store", store)
    mocker.patch.object(contact_rate_limiter, "clock", fake_clock)
    return contact_rate_limiter


@pytest.fixture(scope="function")
def mock_captcha_verify(mocker):
    """Fixture to patch and provide a mock for captcha_service.verify_token."""
    mock = mocker.patch(
        "app.api.endpoints.contact.captcha_service.verify_token",
        new_callable=AsyncMock,
    )
    mock.return_value = True
    return mock


@pytest.fixture(scope="function")
def mock_mail_send_contact_notification(mocker):
    """Fixture to patch and provide a mock for mail_service.send_contact_notification."""
    mock = mocker.patch(
        "app.api.endpoints.contact.mail_service.send_contact_notification",
        new_callable=AsyncMock,
    )
    mock.return_value = ContactTestConstants.MOCK_MESSAGE_ID.value
    return mock
