import base64
import binascii

from pydantic import BaseModel, ConfigDict, Field

from moral_tales.model.options import (
    DEFAULT_STORY_LENGTH,
    MAX_STORY_LENGTH,
    MIN_STORY_LENGTH,
    Language,
    Topic,
)

DATA_URI_PREFIX = "data:"


class StoryRequest(BaseModel):
    topic: Topic = Field(Topic.HONESTY, description="the moral the story is about.")
    language: Language = Field(Language.ENGLISH, description="the language the story is written in.")
    length: int = Field(DEFAULT_STORY_LENGTH, ge=MIN_STORY_LENGTH, le=MAX_STORY_LENGTH,
                        description="the number of scenes of the story.")
    include_images: bool = Field(True, description="whether every scene gets an illustration.")


class StoryScene(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    paragraph: str = Field(..., min_length=1, description="the text of the scene.")
    image_prompt: str = Field(..., min_length=1, alias="imagePrompt",
                              description="a one-sentence, visually rich prompt describing the scene illustration.")


class StoryPart(BaseModel):
    paragraph: str = Field(..., description="the text of the part.")
    image_url: str = Field("", description="the illustration as a data URI, empty when there is none.")

    @property
    def has_image(self) -> bool:
        return bool(self.image_url)

    def image_bytes(self) -> bytes:
        return decode_data_uri(self.image_url)


def to_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{b64}"


def decode_data_uri(uri: str) -> bytes:
    """
    Decode a base64 ``data:`` URI into raw bytes.

    Raises:
        ValueError: if the URI is empty, not a data URI, or not base64 encoded.
    """
    if not uri or not uri.startswith(DATA_URI_PREFIX):
        raise ValueError("Not a data URI.")
    header, sep, payload = uri.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ValueError("Only base64 data URIs are supported.")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
