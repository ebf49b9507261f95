import logging

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

BIRTHDAY_PROMPT = (
    "Cheerful happy birthday instrumental music, upbeat celebration, joyful party atmosphere, "
    "acoustic guitar and piano, warm and festive"
)
BIRTHDAY_DURATION_SECONDS = 30


class MusicGenerationError(Exception):
    """Raised when birthday music could not be generated."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MusicService:
    """Service for generating birthday music with ElevenLabs."""

    async def generate_birthday_music(self) -> bytes:
        """Generate a short birthday instrumental.

        Returns:
            MP3 audio bytes

        Raises:
            MusicGenerationError: If the API key is missing or ElevenLabs fails
        """
        if not settings.ELEVENLABS_API_KEY:
            logger.error("ELEVENLABS_API_KEY is not configured")
            raise MusicGenerationError("Music generation is not configured")

        logger.info("Generating birthday music...")
        try:
            async with httpx.AsyncClient(timeout=settings.ELEVENLABS_TIMEOUT_SECONDS) as client:
                response = await client.post(
                    settings.ELEVENLABS_MUSIC_URL,
                    headers={
                        "xi-api-key": settings.ELEVENLABS_API_KEY,
                        "Content-Type": "application/json",
                    },
                    json={
                        "prompt": BIRTHDAY_PROMPT,
                        "duration_seconds": BIRTHDAY_DURATION_SECONDS,
                    },
                )
        except httpx.HTTPError as e:
            logger.error(f"Error reaching ElevenLabs: {str(e)}")
            raise MusicGenerationError("Failed to generate music") from e

        if not response.is_success:
            logger.error(f"ElevenLabs API error: {response.status_code} {response.text}")
            raise MusicGenerationError("Failed to generate music")

        logger.info("Birthday music generated successfully")
        return response.content


music_service = MusicService()
