"""Contact form models for the storefront functions API.

This module contains the Pydantic models for contact form functionality.
Field bounds are checked by the contact validation service rather than here,
so the honeypot and CAPTCHA checks can run before validation.
"""

from typing import Optional
from typing_extensions import Annotated
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ContactSubmission(BaseModel):
    """Incoming contact form submission.

    Attributes:
        name: Name of the person contacting the shop
        email: Email address to reply to
        subject: Subject line of the inquiry
        message: The message body
        honeypot: Hidden form field that only automated form-fillers populate
        verification_token: CAPTCHA token issued to the browser
    """
    name: Annotated[Optional[str], Field(None, description="Name of the person contacting the shop")]
    email: Annotated[Optional[str], Field(None, description="Email address to reply to")]
    subject: Annotated[Optional[str], Field(None, description="Subject line of the inquiry")]
    message: Annotated[Optional[str], Field(None, description="The message body")]
    honeypot: Annotated[Optional[str], Field(None, description="Hidden anti-spam field, must be left empty")]
    verification_token: Annotated[
        Optional[str],
        Field(
            None,
            validation_alias=AliasChoices("verificationToken", "turnstileToken", "verification_token"),
            description="CAPTCHA verification token",
        ),
    ]

    model_config = ConfigDict(populate_by_name=True)


class ContactFormResponse(BaseModel):
    """Response model for contact form submissions.

    Attributes:
        success: Whether the submission was accepted
        message: Success message for the user
    """
    success: bool = Field(..., description="Whether the submission was accepted")
    message: Optional[str] = Field(None, description="Success message for the user")


class ContactFormErrorResponse(BaseModel):
    """Error response model for contact form submissions."""
    success: bool = Field(False, description="Always false for errors")
    error: str = Field(..., description="User-facing error message")
