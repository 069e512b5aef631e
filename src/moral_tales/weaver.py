import logging
from typing import Any, Callable, Dict, List, Optional, Union

from moral_tales.errors import PARTIAL_IMAGES_MESSAGE, BackendError, ConfigurationError, StoryError
from moral_tales.model.options import Language, Topic
from moral_tales.model.result import Fatal, GenerationResult, PartialFailure, Success
from moral_tales.model.story import StoryPart, StoryRequest, StoryScene
from moral_tales.prompts import build_illustration_prompt, build_story_prompt
from moral_tales.settings import Settings
from moral_tales.tools.gemini_tool import GeminiStudio

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, Dict[str, Any]], None]


class StoryWeaver():
    """Writes a moral story and illustrates it scene by scene."""

    def __init__(self, settings: Optional[Settings] = None, studio: Optional[GeminiStudio] = None):
        self.settings = settings or Settings.from_env()
        self.studio = studio or GeminiStudio(self.settings)

    def generate(
        self,
        topic: Union[Topic, str],
        language: Union[Language, str],
        length: int,
        include_images: bool,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> GenerationResult:
        """
        Run the whole pipeline for one request.

        Backend failures never escape this method: they come back as a ``Fatal``
        result, or as a ``PartialFailure`` when only illustrations were lost.
        Invalid selections raise ``ValueError`` before anything is called.
        """
        request = StoryRequest(topic=topic, language=language, length=length, include_images=include_images)
        return self.run(request, progress_callback=progress_callback)

    def run(self, request: StoryRequest, progress_callback: Optional[ProgressCallback] = None) -> GenerationResult:
        try:
            self.settings.require_api_key()
        except ConfigurationError as e:
            return Fatal(message=str(e))

        self._notify(progress_callback, "story:generating", topic=request.topic.value, length=request.length)
        try:
            scenes = self.studio.generate_scenes(build_story_prompt(request))
        except StoryError as e:
            logger.error(f"Story generation failed: {e}")
            return Fatal(message=str(e))
        if len(scenes) != request.length:
            logger.warning(f"Asked for {request.length} scenes, received {len(scenes)}")
        self._notify(progress_callback, "story:generated", total_scenes=len(scenes))

        if not request.include_images:
            parts = [StoryPart(paragraph=scene.paragraph) for scene in scenes]
            self._notify(progress_callback, "pipeline:complete", total_parts=len(parts), failures=0)
            return Success(parts)

        return self._illustrate(scenes, progress_callback)

    def _illustrate(self, scenes: List[StoryScene], progress_callback: Optional[ProgressCallback]) -> GenerationResult:
        parts: List[StoryPart] = []
        last_error: Optional[BackendError] = None
        failures = 0
        total = len(scenes)

        for index, scene in enumerate(scenes, start=1):
            self._notify(progress_callback, "image:generating", index=index, total=total)
            try:
                image_url = self.studio.generate_image(build_illustration_prompt(scene.image_prompt))
            except BackendError as e:
                logger.error(f"Failed to generate image for scene {index}: {e}")
                last_error = e
                failures += 1
                parts.append(StoryPart(paragraph=scene.paragraph))
                self._notify(progress_callback, "image:failed", index=index, total=total, message=str(e))
                continue
            parts.append(StoryPart(paragraph=scene.paragraph, image_url=image_url))
            self._notify(progress_callback, "image:done", index=index, total=total)

        self._notify(progress_callback, "pipeline:complete", total_parts=len(parts), failures=failures)
        if last_error is not None:
            return PartialFailure(parts, f"{PARTIAL_IMAGES_MESSAGE} {last_error}")
        return Success(parts)

    @staticmethod
    def _notify(callback: Optional[ProgressCallback], stage: str, **payload: Any) -> None:
        if callback is not None:
            callback(stage, payload)
