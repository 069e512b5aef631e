"""
Error kinds raised while talking to the story and illustration backends.

Every error carries a message that is safe to show to the reader as is.
"""

MISSING_API_KEY_MESSAGE = "GEMINI_API_KEY is not configured. Story generation is disabled."
STORY_QUOTA_MESSAGE = "The daily limit for creating stories has been reached. Please try again tomorrow."
STORY_FAILED_MESSAGE = "I had a little trouble dreaming up a story. Could you try a different topic?"
IMAGE_QUOTA_MESSAGE = "The daily limit for creating images has been reached. Please try again tomorrow."
IMAGE_FAILED_MESSAGE = "The image generator is busy or encountered an error. Please try again in a few moments."
PARTIAL_IMAGES_MESSAGE = "We created the story text, but had trouble with the pictures."

QUOTA_MARKERS = ("quota", "resource_exhausted")


class StoryError(Exception):
    """Base class for all moral_tales errors."""


class ConfigurationError(StoryError):
    pass


class BackendError(StoryError):
    pass


class QuotaExceededError(BackendError):
    pass


class MalformedResponseError(BackendError):
    pass


class ExportError(StoryError):
    pass


def is_quota_error(error: BaseException) -> bool:
    text = str(error).lower()
    return any(marker in text for marker in QUOTA_MARKERS)
