"""AI service for rendering customers wearing a spot tee.

This module talks to the OpenAI-compatible AI gateway, sending the user's
photo together with a prompt that describes the shirt.
"""
import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from app.core.config import settings
from app.models.image import SpotTeeImageRequest, SpotTeeImageResponse

logger = logging.getLogger(__name__)

COLOR_DESCRIPTIONS = {
    "White": "pure white",
    "Coral": "coral orange",
    "Mauve": "soft mauve pink",
    "Sunset": "warm sunset orange",
    "Tan": "light tan beige",
    "Army": "army green olive",
    "Dark Heather": "dark heather charcoal gray",
    "Olive": "olive green",
    "Ice Blue": "light ice blue",
    "Blue Jean": "faded blue jean denim blue",
    "Grey": "medium grey",
    "Sky": "light sky blue",
    "Brown Savana": "brown savana earthy brown",
    "Espresso": "dark espresso brown",
    "Black": "solid black",
    "Navy": "navy blue",
    "Pink": "soft pink",
    "Peachy": "peachy coral pink",
    "Red": "vibrant red",
}

DEFAULT_POSE_INSTRUCTION = (
    "Keep the person in the same pose and setting, but change their top to this t-shirt."
)


class ImageGenerationError(Exception):
    """Raised when the AI gateway could not produce an image.

    Attributes:
        message: User-facing message
        status_code: HTTP status the endpoint should answer with
    """

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from a dict or an SDK model with extra fields."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    value = getattr(obj, name, None)
    if value is None and getattr(obj, "model_extra", None):
        value = obj.model_extra.get(name)
    return value


class SpotTeeImageService:
    """Service for generating spot tee try-on images."""

    def __init__(self):
        self.client: Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        if not settings.AI_GATEWAY_API_KEY:
            logger.error("AI_GATEWAY_API_KEY is not configured")
            raise ImageGenerationError("Image generation is not configured")

        if self.client is None:
            self.client = AsyncOpenAI(
                api_key=settings.AI_GATEWAY_API_KEY,
                base_url=settings.AI_GATEWAY_URL,
                timeout=settings.AI_GATEWAY_TIMEOUT_SECONDS,
                max_retries=0,
            )
        return self.client

    def _build_prompt(self, request: SpotTeeImageRequest) -> str:
        """Build the image prompt.

        Args:
            request: The image request

        Returns:
            Formatted prompt string
        """
        color_desc = COLOR_DESCRIPTIONS.get(request.color, request.color.lower())
        instruction = request.custom_prompt or DEFAULT_POSE_INSTRUCTION

        return (
            f"Transform this person's photo to show them wearing a {color_desc} colored t-shirt "
            f"with a small black Labrador dog embroidered logo on the upper left chest area. "
            f"The t-shirt should be a casual crew-neck style, size {request.size}. {instruction} "
            f"The image should look natural and realistic, like a professional product photo. "
            f"The black Labrador logo should be small and subtle, positioned on the upper left chest."
        )

    def _parse_response(self, response: Any) -> SpotTeeImageResponse:
        choices = _field(response, "choices") or []
        message = _field(choices[0], "message") if choices else None
        images = _field(message, "images") or []
        image_url = _field(_field(images[0], "image_url"), "url") if images else None

        if not image_url:
            logger.error(f"No image in AI gateway response: {response}")
            raise ImageGenerationError("Failed to generate image")

        text = _field(message, "content")
        return SpotTeeImageResponse(
            image_url=image_url,
            message=text or "Image generated successfully!",
        )

    async def generate_image(self, request: SpotTeeImageRequest) -> SpotTeeImageResponse:
        """Generate a try-on image from the user's photo.

        Args:
            request: Image request with the user's photo, color and size

        Returns:
            The generated image data URL and the model's text

        Raises:
            ImageGenerationError: With the status code the caller should use
        """
        client = self._get_client()
        prompt = self._build_prompt(request)
        logger.info(f"Generating image with prompt: {prompt}")

        try:
            response = await client.chat.completions.create(
                model=settings.IMAGE_MODEL_NAME,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": request.user_image_base64}},
                        ],
                    }
                ],
                extra_body={"modalities": ["image", "text"]},
            )
        except openai.RateLimitError as e:
            logger.error(f"AI gateway rate limited: {str(e)}")
            raise ImageGenerationError("Rate limit exceeded. Please try again later.", 429)
        except openai.APIStatusError as e:
            logger.error(f"AI gateway error: {e.status_code} {str(e)}")
            if e.status_code == 402:
                raise ImageGenerationError(
                    "Service temporarily unavailable. Please try again later.", 402
                )
            raise ImageGenerationError("Failed to generate image")
        except openai.OpenAIError as e:
            logger.error(f"AI gateway request failed: {str(e)}")
            raise ImageGenerationError("Failed to generate image")

        logger.info("AI response received")
        return self._parse_response(response)


image_service = SpotTeeImageService()
