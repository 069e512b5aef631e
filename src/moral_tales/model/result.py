"""
Outcome of a story generation run.

A run either fully succeeds, succeeds on the text but loses one or more
illustrations, or fails as a whole. The three cases are distinct types so
callers can branch on them without catching exceptions.
"""

from dataclasses import dataclass, field
from typing import List

from moral_tales.model.story import StoryPart


@dataclass(frozen=True)
class GenerationResult:
    parts: List[StoryPart] = field(default_factory=list)
    message: str = ""

    @property
    def ok(self) -> bool:
        return False

    @property
    def is_partial(self) -> bool:
        return False


@dataclass(frozen=True)
class Success(GenerationResult):

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class PartialFailure(GenerationResult):

    @property
    def is_partial(self) -> bool:
        return True


@dataclass(frozen=True)
class Fatal(GenerationResult):

    def __post_init__(self):
        # a fatal run never carries parts
        if self.parts:
            raise ValueError("Fatal results cannot carry story parts.")
