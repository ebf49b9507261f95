"""Contact form endpoint for the storefront functions API.

This module contains the FastAPI route that turns contact form submissions
into an email to the shop operator, guarded by a honeypot, a CAPTCHA and
per-IP/per-email rate limits.
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.core.config import settings
from app.models.contact import ContactSubmission, ContactFormResponse, ContactFormErrorResponse
from app.services.captcha_service import captcha_service
from app.services.contact_validation import normalize_email, validate_contact_submission
from app.services.mail_service import mail_service, MailServiceError
from app.services.rate_limit_service import contact_rate_limiter
from app.utils.helper_functions import get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter()

TOO_MANY_REQUESTS = "Too many requests. Please try again later."
SEND_FAILED = "Unable to send message. Please try again later."
INVALID_BODY = "Invalid request body."
VERIFICATION_REQUIRED = "Verification required. Please complete the CAPTCHA."
VERIFICATION_FAILED = "Verification failed. Please try again."


def _error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ContactFormErrorResponse(error=error).model_dump(),
    )


@router.post(
    "/send-contact-email",
    response_model=ContactFormResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Submit contact form",
    description="Send a contact form message to the shop operator. No authentication required.",
    responses={
        400: {"model": ContactFormErrorResponse},
        429: {"model": ContactFormErrorResponse},
        500: {"model": ContactFormErrorResponse},
    },
)
async def send_contact_email(http_request: Request):
    """
    Submit a contact form message to the shop operator.

    Steps, each of which can end the request early:
    - IP rate limit (before the body is read)
    - Body parsing
    - Honeypot check (answers success without sending anything)
    - CAPTCHA verification
    - Field validation
    - Email rate limit
    - Email delivery

    Args:
        http_request: FastAPI request object, read for headers and JSON body

    Returns:
        ContactFormResponse on success, or a JSON error envelope
    """
    try:
        client_ip = get_client_ip(
            http_request.headers, http_request.client.host if http_request.client else None
        )

        if await contact_rate_limiter.is_rate_limited(f"ip:{client_ip}", settings.RATE_LIMIT_IP_MAX):
            logger.warning(f"Rate limit exceeded for IP: {client_ip}")
            return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, TOO_MANY_REQUESTS)

        try:
            payload = await http_request.json()
        except ValueError as e:
            logger.info(f"Rejected malformed contact body from {client_ip}: {str(e)}")
            return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY)

        if not isinstance(payload, dict):
            logger.info(f"Rejected non-object contact body from {client_ip}")
            return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY)

        # honeypot is checked before field types are validated
        if payload.get("honeypot"):
            logger.info(f"Honeypot triggered - spam detected from {client_ip}")
            return ContactFormResponse(success=True)

        try:
            submission = ContactSubmission.model_validate(payload)
        except ValidationError as e:
            logger.info(f"Rejected malformed contact body from {client_ip}: {str(e)}")
            return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY)

        if not submission.verification_token:
            return _error_response(status.HTTP_400_BAD_REQUEST, VERIFICATION_REQUIRED)

        if not await captcha_service.verify_token(submission.verification_token, client_ip):
            logger.warning(f"Invalid Turnstile token from IP: {client_ip}")
            return _error_response(status.HTTP_400_BAD_REQUEST, VERIFICATION_FAILED)

        validation_error = validate_contact_submission(submission)
        if validation_error:
            return _error_response(status.HTTP_400_BAD_REQUEST, validation_error)

        normalized_email = normalize_email(submission.email)
        if await contact_rate_limiter.is_rate_limited(f"email:{normalized_email}", settings.RATE_LIMIT_EMAIL_MAX):
            logger.warning(f"Email rate limit exceeded for: {normalized_email}")
            return _error_response(status.HTTP_429_TOO_MANY_REQUESTS, TOO_MANY_REQUESTS)

        try:
            message_id = await mail_service.send_contact_notification(submission)
        except MailServiceError as e:
            logger.error(f"Failed to send contact email: {str(e)}")
            return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SEND_FAILED)

        logger.info(f"Contact email sent successfully to owner (id: {message_id})")
        return ContactFormResponse(success=True, message="Email sent successfully")

    except Exception as e:
        logger.error(f"Error in send-contact-email: {str(e)}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SEND_FAILED)
