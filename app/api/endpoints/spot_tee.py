"""Spot tee try-on image endpoint.
"""
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.models.image import SpotTeeImageRequest, SpotTeeImageResponse, FunctionErrorResponse
from app.services.image_service import image_service, ImageGenerationError
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_BODY = "Invalid request body."


def _error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=FunctionErrorResponse(error=error).model_dump(),
    )


@router.post(
    "/generate-spot-tee-image",
    response_model=SpotTeeImageResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate a spot tee try-on image",
    description="Render the uploaded photo with the person wearing a spot tee in the chosen color and size.",
    responses={
        400: {"model": FunctionErrorResponse},
        402: {"model": FunctionErrorResponse},
        429: {"model": FunctionErrorResponse},
        500: {"model": FunctionErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": SpotTeeImageRequest.model_json_schema()}},
        }
    },
)
async def generate_spot_tee_image(http_request: Request):
    """Generate a try-on image.

    Args:
        http_request: FastAPI request whose JSON body holds the user's photo
            plus shirt color, size and optional prompt

    Returns:
        The generated image URL and a short message from the model
    """
    try:
        payload = SpotTeeImageRequest.model_validate(await http_request.json())
    except (ValidationError, ValueError) as e:
        logger.info(f"Rejected malformed image request: {str(e)}")
        return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY)

    if not payload.user_image_base64:
        return _error_response(status.HTTP_400_BAD_REQUEST, "User image is required")

    try:
        return await image_service.generate_image(payload)

    except ImageGenerationError as e:
        return _error_response(e.status_code, e.message)

    except Exception as e:
        logger.error(f"Error in generate-spot-tee-image: {str(e)}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to generate image")
