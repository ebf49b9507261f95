"""
Contact form validation.

Only checks the shape of a submission. Escaping for the outgoing email is
done by the mail service templates.
"""

import re
from typing import Optional

from app.models.contact import ContactSubmission


MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 100
MIN_SUBJECT_LENGTH = 1
MAX_SUBJECT_LENGTH = 200
MIN_MESSAGE_LENGTH = 10
MAX_MESSAGE_LENGTH = 1000

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_NAME = "Please provide a valid name."
INVALID_EMAIL = "Please provide a valid email address."
INVALID_SUBJECT = "Please provide a valid subject."
INVALID_MESSAGE = (
    f"Message must be between {MIN_MESSAGE_LENGTH} and {MAX_MESSAGE_LENGTH} characters."
)


def _length_between(value: Optional[str], minimum: int, maximum: int) -> bool:
    return value is not None and minimum <= len(value) <= maximum


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


def normalize_email(email: str) -> str:
    """Lower-case and trim an email address for use as a rate limit key."""
    return email.strip().lower()


def validate_contact_submission(submission: ContactSubmission) -> Optional[str]:
    """
    Validate a contact submission.

    Args:
        submission: Parsed contact form submission

    Returns:
        None when the submission is valid, otherwise the user-facing reason
        for the first failing field (name, email, subject, message).
    """
    if not _length_between(submission.name, MIN_NAME_LENGTH, MAX_NAME_LENGTH):
        return INVALID_NAME

    if not is_valid_email(submission.email):
        return INVALID_EMAIL

    if not _length_between(submission.subject, MIN_SUBJECT_LENGTH, MAX_SUBJECT_LENGTH):
        return INVALID_SUBJECT

    if not _length_between(submission.message, MIN_MESSAGE_LENGTH, MAX_MESSAGE_LENGTH):
        return INVALID_MESSAGE

    return None
