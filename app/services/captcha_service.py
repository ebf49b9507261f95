import logging

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class CaptchaService:
    """Service for verifying Cloudflare Turnstile tokens."""

    async def verify_token(self, token: str, remote_ip: str) -> bool:
        """Verify a Turnstile token issued to the browser.

        Every failure mode (missing secret, rejected token, network or parse
        error) collapses to False. The cause is only logged.

        Args:
            token: Token supplied by the client widget
            remote_ip: IP address of the submitting client

        Returns:
            True only if the verification service reports success
        """
        if not settings.TURNSTILE_SECRET_KEY:
            logger.error("TURNSTILE_SECRET_KEY is not configured")
            return False

        try:
            async with httpx.AsyncClient(timeout=settings.OUTBOUND_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    settings.TURNSTILE_VERIFY_URL,
                    data={
                        "secret": settings.TURNSTILE_SECRET_KEY,
                        "response": token,
                        "remoteip": remote_ip,
                    },
                )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Turnstile verification error: {str(e)}")
            return False

        if not isinstance(data, dict) or data.get("success") is not True:
            error_codes = data.get("error-codes") if isinstance(data, dict) else None
            logger.warning(f"Turnstile rejected token from {remote_ip}: {error_codes}")
            return False

        return True


captcha_service = CaptchaService()
