import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from moral_tales.errors import MISSING_API_KEY_MESSAGE, ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_STORY_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"
DEFAULT_STORY_TEMPERATURE = 0.8

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    story_model: str = DEFAULT_STORY_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    story_temperature: float = DEFAULT_STORY_TEMPERATURE
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """Build settings from the environment, loading a .env file first when asked."""
        if load_env_file:
            load_dotenv()
        return cls(
            api_key=os.getenv("GEMINI_API_KEY", "").strip(),
            story_model=os.getenv("STORY_MODEL", DEFAULT_STORY_MODEL),
            image_model=os.getenv("GEMINI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            story_temperature=float(os.getenv("STORY_TEMPERATURE", DEFAULT_STORY_TEMPERATURE)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def require_api_key(self) -> str:
        if not self.api_key:
            logger.error("GEMINI_API_KEY is missing")
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)
        return self.api_key


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
