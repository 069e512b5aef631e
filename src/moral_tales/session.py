from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from moral_tales.model.options import VoiceStyle
from moral_tales.model.result import GenerationResult
from moral_tales.model.story import StoryPart, StoryRequest

INTERRUPTED_MESSAGE = "Story generation was interrupted. Press Generate Story to try again."


@dataclass
class StoryView:
    """Transient view state of the story page. Lives in the Streamlit session only."""

    request: StoryRequest = field(default_factory=StoryRequest)
    voice_style: VoiceStyle = VoiceStyle.CARTOON_GIRL
    is_generating: bool = False
    parts: List[StoryPart] = field(default_factory=list)
    error: Optional[str] = None
    is_partial: bool = False

    def begin(self, request: StoryRequest) -> None:
        if self.is_generating:
            raise RuntimeError("A story is already being generated.")
        self.request = request
        self.is_generating = True
        self.error = None
        self.is_partial = False
        self.parts = []

    def finish(self, result: GenerationResult) -> None:
        self.is_generating = False
        self.parts = list(result.parts)
        self.error = result.message or None
        self.is_partial = result.is_partial

    def interrupt(self) -> None:
        """Drop a run that was stopped before it returned; it is not started again."""
        self.is_generating = False
        self.is_partial = False
        self.parts = []
        self.error = INTERRUPTED_MESSAGE

    @property
    def full_story(self) -> str:
        return "\n\n".join(part.paragraph for part in self.parts)

    @property
    def has_story(self) -> bool:
        return bool(self.parts)

    @property
    def can_export(self) -> bool:
        return self.has_story and not self.is_generating

    @property
    def can_play(self) -> bool:
        return bool(self.full_story) and not self.is_generating


STORY_SHARE = 0.2


def progress_update(stage: str, payload: dict) -> Tuple[float, str]:
    """Map an orchestrator progress event to a progress-bar fraction and caption."""
    if stage == "story:generating":
        return 0.05, "Dreaming up your story..."
    if stage == "story:generated":
        return STORY_SHARE, f"Wrote {payload.get('total_scenes', 0)} scenes."
    total = max(1, int(payload.get("total", 1)))
    index = int(payload.get("index", 0))
    if stage == "image:generating":
        return STORY_SHARE + (1 - STORY_SHARE) * (index - 1) / total, f"Painting picture {index} of {total}..."
    if stage == "image:done":
        return STORY_SHARE + (1 - STORY_SHARE) * index / total, f"Picture {index} of {total} is ready."
    if stage == "image:failed":
        return STORY_SHARE + (1 - STORY_SHARE) * index / total, f"Picture {index} of {total} could not be painted."
    if stage == "pipeline:complete":
        return 1.0, "Your storybook is ready!"
    return 0.0, ""
