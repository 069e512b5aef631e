from enum import Enum
from typing import List

MIN_STORY_LENGTH = 2
MAX_STORY_LENGTH = 6
DEFAULT_STORY_LENGTH = 3


class Topic(str, Enum):
    HONESTY = "Honesty"
    KINDNESS = "Kindness"
    FRIENDSHIP = "Friendship"
    TEAMWORK = "Teamwork"
    COURAGE = "Courage"
    PATIENCE = "Patience"
    SHARING = "Sharing"
    FORGIVENESS = "Forgiveness"
    RESPECT = "Respect"
    RESPONSIBILITY = "Responsibility"
    PERSEVERANCE = "Perseverance"
    GENEROSITY = "Generosity"


class Language(str, Enum):
    ENGLISH = "English"
    HINDI = "Hindi"
    SPANISH = "Spanish"
    FRENCH = "French"
    GERMAN = "German"
    MANDARIN = "Mandarin"
    BILINGUAL = "Bilingual (English + Hindi)"


class VoiceStyle(str, Enum):
    CARTOON_GIRL = "Cartoon Girl"
    CARTOON_BOY = "Cartoon Boy"
    FAIRY = "Fairy Voice"
    FRIENDLY_ANIMAL = "Friendly Animal Voice"


def option_values(enum_cls) -> List[str]:
    """Display values of an option enum, in declaration order."""
    return [member.value for member in enum_cls]


TOPIC_OPTIONS = option_values(Topic)
LANGUAGE_OPTIONS = option_values(Language)
VOICE_STYLE_OPTIONS = option_values(VoiceStyle)
