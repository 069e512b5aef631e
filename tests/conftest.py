import io
import json
from types import SimpleNamespace

import pytest
from PIL import Image

from moral_tales.settings import Settings
from moral_tales.tools.gemini_tool import GeminiStudio
from moral_tales.weaver import StoryWeaver


def png_bytes(size=(8, 6), mode="RGB", color=(255, 200, 0)) -> bytes:
    if mode == "RGBA":
        color = color + (128,)
    out = io.BytesIO()
    Image.new(mode, size, color).save(out, "PNG")
    return out.getvalue()


def scenes_json(count: int) -> str:
    return json.dumps([
        {"paragraph": f"Paragraph {i}.", "imagePrompt": f"a bunny in scene {i}"}
        for i in range(1, count + 1)
    ])


class FakeModels:
    """Stands in for ``genai.Client().models``; replays queued outcomes."""

    def __init__(self, text=None, images=None):
        self.text = text
        self.images = list(images or [])
        self.content_calls = []
        self.image_calls = []

    def generate_content(self, *, model, contents, config=None):
        self.content_calls.append({"model": model, "contents": contents, "config": config})
        if isinstance(self.text, Exception):
            raise self.text
        return SimpleNamespace(text=self.text)

    def generate_images(self, *, model, prompt, config=None):
        self.image_calls.append({"model": model, "prompt": prompt, "config": config})
        outcome = self.images.pop(0) if self.images else png_bytes()
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is None:
            return SimpleNamespace(generated_images=[])
        return SimpleNamespace(generated_images=[SimpleNamespace(image=SimpleNamespace(image_bytes=outcome))])


class FakeClient:
    def __init__(self, models: FakeModels):
        self.models = models


@pytest.fixture
def settings():
    return Settings(api_key="test-key")


@pytest.fixture
def make_weaver(settings):
    def _make(text=None, images=None, settings_override=None):
        models = FakeModels(text=text, images=images)
        active = settings_override or settings
        studio = GeminiStudio(active, client=FakeClient(models))
        return StoryWeaver(active, studio=studio), models
    return _make
