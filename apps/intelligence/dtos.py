"""DTOs for Intelligence app."""
from dataclasses import dataclass, field
from typing import Optional, Tuple


class CatalystSource:
    AI = 'ai'
    FALLBACK = 'fallback'


@dataclass(frozen=True)
class CatalystRequestDTO:
    """Descriptive fields of a task, as handed to the generator."""
    task_title: str
    task_description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None


@dataclass(frozen=True)
class CatalystResultDTO:
    """
    One micro-task suggestion.
    estimated_minutes is always within [1, 5].
    """
    content: str
    estimated_minutes: int
    source: str = CatalystSource.AI
    relevance_score: int = 0
    matched_interests: Tuple[str, ...] = field(default_factory=tuple)
