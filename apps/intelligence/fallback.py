"""
Offline catalyst table.

Used whenever the text-generation service is unavailable or returns
something unusable. Rules are evaluated in order and the first match wins,
so a title containing both "write" and "call" always gets the writing
catalyst.
"""
from dataclasses import dataclass
from typing import Tuple

from .dtos import CatalystResultDTO, CatalystSource


@dataclass(frozen=True)
class FallbackRule:
    keywords: Tuple[str, ...]
    content: str
    minutes: int

    def matches(self, lowered_title: str) -> bool:
        return any(keyword in lowered_title for keyword in self.keywords)


FALLBACK_RULES: Tuple[FallbackRule, ...] = (
    FallbackRule(
        keywords=("write", "report", "document", "essay", "blog"),
        content="Open a blank document and write just the title and today's date",
        minutes=2,
    ),
    FallbackRule(
        keywords=("study", "learn", "read", "research"),
        content="Find your study materials and open to the first relevant page",
        minutes=3,
    ),
    FallbackRule(
        keywords=("organize", "clean", "sort", "declutter"),
        content="Set a 5-minute timer and gather all related items in one place",
        minutes=5,
    ),
    FallbackRule(
        keywords=("call", "phone", "contact"),
        content="Find the contact number and save it to your phone favorites",
        minutes=2,
    ),
    FallbackRule(
        keywords=("email", "message", "send"),
        content="Open your email app and write just the subject line",
        minutes=1,
    ),
    FallbackRule(
        keywords=("exercise", "workout", "gym", "run"),
        content="Put on your workout clothes and set them aside",
        minutes=3,
    ),
    FallbackRule(
        keywords=("cook", "meal", "recipe"),
        content="Find the recipe and lay out just one ingredient",
        minutes=2,
    ),
)

DEFAULT_FALLBACK_CONTENT = "Set a 5-minute timer and take the very first small step"
DEFAULT_FALLBACK_MINUTES = 5


def fallback_catalyst(task_title: str) -> CatalystResultDTO:
    """Deterministic keyword lookup; never fails."""
    lowered = (task_title or "").lower()

    for rule in FALLBACK_RULES:
        if rule.matches(lowered):
            return CatalystResultDTO(
                content=rule.content,
                estimated_minutes=rule.minutes,
                source=CatalystSource.FALLBACK,
            )

    return CatalystResultDTO(
        content=DEFAULT_FALLBACK_CONTENT,
        estimated_minutes=DEFAULT_FALLBACK_MINUTES,
        source=CatalystSource.FALLBACK,
    )
