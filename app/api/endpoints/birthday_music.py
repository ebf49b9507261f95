"""Birthday music endpoint."""
import logging

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse

from app.models.image import FunctionErrorResponse
from app.services.music_service import music_service, MusicGenerationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/generate-birthday-music",
    status_code=status.HTTP_200_OK,
    summary="Generate birthday music",
    description="Generate a 30 second birthday instrumental as MP3 audio.",
    response_class=Response,
    responses={
        200: {"content": {"audio/mpeg": {}}},
        500: {"model": FunctionErrorResponse},
    },
)
async def generate_birthday_music():
    try:
        audio = await music_service.generate_birthday_music()
        return Response(content=audio, media_type="audio/mpeg")

    except MusicGenerationError as e:
        error = e.message
    except Exception as e:
        logger.error(f"Error generating birthday music: {str(e)}")
        error = "Failed to generate music"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=FunctionErrorResponse(error=error).model_dump(),
    )
