import io
import logging
from typing import List, Optional

from google import genai
from google.genai import types
from PIL import Image
from pydantic import TypeAdapter, ValidationError

from moral_tales.errors import (
    IMAGE_FAILED_MESSAGE,
    IMAGE_QUOTA_MESSAGE,
    STORY_FAILED_MESSAGE,
    STORY_QUOTA_MESSAGE,
    BackendError,
    MalformedResponseError,
    QuotaExceededError,
    is_quota_error,
)
from moral_tales.model.story import StoryScene, to_data_uri
from moral_tales.settings import Settings

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPE = "image/png"
IMAGE_ASPECT_RATIO = "4:3"

SCENES_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "paragraph": types.Schema(type=types.Type.STRING),
            "imagePrompt": types.Schema(type=types.Type.STRING),
        },
        required=["paragraph", "imagePrompt"],
    ),
)

_scenes_adapter = TypeAdapter(List[StoryScene])


def parse_scenes(raw: Optional[str]) -> List[StoryScene]:
    """
    Parse the JSON text returned by the story model.

    Raises:
        MalformedResponseError: if the text is not a non-empty JSON array of scenes.
    """
    if not raw or not raw.strip():
        raise MalformedResponseError("AI did not return any story text.")
    try:
        scenes = _scenes_adapter.validate_json(raw.strip())
    except ValidationError as e:
        raise MalformedResponseError(f"AI did not return a valid story structure: {e}") from e
    if not scenes:
        raise MalformedResponseError("AI did not return a valid story structure.")
    return scenes


class GeminiStudio:
    """
    Thin wrapper over the google-genai client for the two calls a story needs:
    one structured text generation and one image generation per scene.

    Every failure leaves this class as a ``BackendError`` subclass whose message
    can be shown to the reader; the raw client exception is chained as the cause.
    """

    def __init__(self, settings: Settings, client: Optional[genai.Client] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.settings.require_api_key())
        return self._client

    def generate_scenes(self, prompt: str) -> List[StoryScene]:
        logger.info(f"Requesting story scenes from {self.settings.story_model}")
        try:
            response = self.client.models.generate_content(
                model=self.settings.story_model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=self.settings.story_temperature,
                    response_mime_type="application/json",
                    response_schema=SCENES_SCHEMA,
                ),
            )
            scenes = parse_scenes(response.text)
        except Exception as e:
            logger.error(f"Error generating story text from Gemini API: {e}")
            if is_quota_error(e):
                raise QuotaExceededError(STORY_QUOTA_MESSAGE) from e
            error_cls = MalformedResponseError if isinstance(e, MalformedResponseError) else BackendError
            raise error_cls(STORY_FAILED_MESSAGE) from e
        logger.info(f"Received {len(scenes)} story scenes")
        return scenes

    def generate_image(self, prompt: str) -> str:
        """
        Generate one illustration for the given prompt.

        Args:
            prompt: Full text prompt for the image model.

        Returns:
            str: The illustration as a ``data:image/png;base64,...`` URI.
        """
        logger.info(f"Generating image: {prompt[:50]}...")
        try:
            response = self.client.models.generate_images(
                model=self.settings.image_model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=1,
                    output_mime_type=IMAGE_MIME_TYPE,
                    aspect_ratio=IMAGE_ASPECT_RATIO,
                ),
            )
            image_data = _first_image_bytes(response)
            if not image_data:
                raise BackendError("API returned a response with no image data.")
            png = _normalize_png(image_data)
        except Exception as e:
            logger.error(f"Error generating image from Gemini API: {e}")
            if is_quota_error(e):
                raise QuotaExceededError(IMAGE_QUOTA_MESSAGE) from e
            raise BackendError(IMAGE_FAILED_MESSAGE) from e
        return to_data_uri(png, IMAGE_MIME_TYPE)


def _first_image_bytes(response) -> Optional[bytes]:
    generated = getattr(response, "generated_images", None) or []
    if not generated:
        return None
    image = getattr(generated[0], "image", None)
    return getattr(image, "image_bytes", None)


def _normalize_png(data: bytes) -> bytes:
    image = Image.open(io.BytesIO(data))

    # Convert image format if needed
    if image.mode in ('P', 'PA'):
        image = image.convert('RGB')
    elif image.mode == 'RGBA':
        background = Image.new('RGB', image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        image = background

    out = io.BytesIO()
    image.save(out, 'PNG')
    return out.getvalue()
