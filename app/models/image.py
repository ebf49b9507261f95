"""Data models for the spot tee image generation API."""

from typing import Optional
from typing_extensions import Annotated
from pydantic import BaseModel, ConfigDict, Field


class SpotTeeImageRequest(BaseModel):
    """Request to render the user wearing a spot tee.

    Attributes:
        user_image_base64: Data URL of the user's photo
        color: Shirt color name as shown in the shop
        size: Shirt size
        custom_prompt: Optional instruction replacing the default pose sentence
    """
    user_image_base64: Annotated[
        Optional[str], Field(None, alias="userImageBase64", description="Data URL of the user's photo")
    ]
    color: Annotated[str, Field("White", description="Shirt color name")]
    size: Annotated[str, Field("M", description="Shirt size")]
    custom_prompt: Annotated[
        Optional[str], Field(None, alias="customPrompt", description="Optional custom instruction")
    ]

    model_config = ConfigDict(populate_by_name=True)


class SpotTeeImageResponse(BaseModel):
    """Generated image response."""
    image_url: Annotated[str, Field(..., alias="imageUrl", description="Data URL of the generated image")]
    message: Annotated[str, Field(..., description="Text returned by the model")]

    model_config = ConfigDict(populate_by_name=True)


class FunctionErrorResponse(BaseModel):
    """Error envelope shared by the proxy functions."""
    error: str = Field(..., description="User-facing error message")
