"""
Catalyst generation.

Turns a task's descriptive fields into one small first action using an
OpenAI chat model, and falls back to the offline keyword table whenever the
model call fails or answers with something unusable.

Usage:
    from apps.intelligence.catalyst import get_catalyst_generator
    from apps.intelligence.dtos import CatalystRequestDTO

    generator = get_catalyst_generator()
    result = generator.generate_catalyst(
        CatalystRequestDTO(task_title="Write quarterly report"),
        interests=["writing", "finance"],
    )

The text-generation client is injected, so tests pass a fake object that
only needs `chat.completions.create(...)`.
"""
import json
import logging
import math
from dataclasses import replace
from functools import lru_cache
from typing import Iterable, List, Optional

from django.conf import settings
from openai import OpenAI
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dtos import CatalystRequestDTO, CatalystResultDTO, CatalystSource
from .fallback import fallback_catalyst

logger = logging.getLogger(__name__)


MIN_MINUTES = 1
MAX_MINUTES = 5
DEFAULT_CONTENT = "Set a 5-minute timer and take the first small step"

SYSTEM_PROMPT = (
    "You are TaskCatalyst AI, specialized in creating psychological catalyst "
    "tasks that overcome procrastination through the Zeigarnik Effect."
)

INSTRUCTIONS = """Generate a single catalyst subtask that:
- Takes under 5 minutes to complete
- Creates tangible progress toward the main task
- Removes initial friction and psychological barriers
- Is impossibly simple to start (no complex decision-making)
- Produces a concrete artifact or outcome
- Is psychologically safe (no risk of failure)

Format: Active verb + specific object + clear outcome
Examples:
- "Open a blank document and write just the task title and today's date"
- "Create a folder named 'Project X' on your desktop"
- "Find your textbook and open it to chapter 5 (leave it open)"
- "Set a 10-minute timer and place it next to your workspace"

Respond with JSON in this exact format:
{
  "content": "Your catalyst micro-task here",
  "estimatedMinutes": 3
}

The content should be practical, specific, and immediately actionable. The estimatedMinutes should be 1-5 minutes."""


def clamp_minutes(value: int) -> int:
    return max(MIN_MINUTES, min(MAX_MINUTES, value))


class CatalystPayload(BaseModel):
    """Validated shape of the model's JSON answer."""
    model_config = ConfigDict(populate_by_name=True)

    content: str = ""
    estimated_minutes: int = Field(default=MAX_MINUTES, alias="estimatedMinutes")

    @field_validator('content', mode='before')
    @classmethod
    def normalize_content(cls, v):
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError("content must be a string")
        return v.strip()

    @field_validator('estimated_minutes', mode='before')
    @classmethod
    def clamp_estimate(cls, v):
        """Rounds to whole minutes and clamps into [1, 5]; missing or zero means 5."""
        if isinstance(v, bool):
            raise ValueError("estimatedMinutes must be a number")
        if v in (None, "", 0):
            return MAX_MINUTES
        try:
            minutes = float(v)
        except (TypeError, ValueError):
            raise ValueError("estimatedMinutes must be a number")
        if not math.isfinite(minutes):
            raise ValueError("estimatedMinutes must be finite")
        return clamp_minutes(int(minutes + 0.5) if minutes >= 0 else 0)


def build_prompt(request: CatalystRequestDTO, interests: Optional[Iterable[str]] = None) -> str:
    """Embed the title and only the optional fields that are present."""
    lines = [
        "You are TaskCatalyst AI, an expert in psychology and productivity. Your job is to "
        "generate a single, perfect \"catalyst\" micro-task that helps users overcome initial "
        "resistance and create momentum toward completing larger tasks.",
        "",
        f'Given this task: "{request.task_title}"',
    ]
    if request.task_description:
        lines.append(f"Description: {request.task_description}")
    if request.category:
        lines.append(f"Category: {request.category}")
    if request.priority:
        lines.append(f"Priority: {request.priority}")

    tags = _clean_interests(interests)
    if tags:
        lines.append(f"The user is interested in: {', '.join(tags)}. Lean on these where it helps.")

    lines.append("")
    lines.append(INSTRUCTIONS)
    return "\n".join(lines)


def _clean_interests(interests: Optional[Iterable[str]]) -> List[str]:
    return [tag.strip() for tag in (interests or []) if tag and tag.strip()]


def annotate_relevance(
    result: CatalystResultDTO,
    request: CatalystRequestDTO,
    interests: Optional[Iterable[str]] = None,
) -> CatalystResultDTO:
    """
    Attach the interests found in the task or catalyst text.
    relevance_score is the matched share of interests as a 0-100 integer.
    """
    tags = _clean_interests(interests)
    if not tags:
        return result

    haystack = " ".join(
        part for part in (
            request.task_title,
            request.task_description,
            request.category,
            result.content,
        ) if part
    ).lower()

    matched = tuple(tag for tag in tags if tag.lower() in haystack)
    # floor(100 * m / n + 0.5) in integer arithmetic
    score = (200 * len(matched) + len(tags)) // (2 * len(tags))
    return replace(result, relevance_score=score, matched_interests=matched)


class CatalystGenerator:
    """
    Produces a catalyst for a task. Never raises to its caller.

    Args:
        client: OpenAI-compatible client, or None to always use the fallback table.
        model: Chat model name.
        temperature: Sampling temperature.
        max_tokens: Completion token cap.
        timeout: Per-call timeout in seconds; None leaves the client default.
    """

    def __init__(
        self,
        client=None,
        model: str = "gpt-4o",
        temperature: float = 0.7,
        max_tokens: int = 200,
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    def generate_catalyst(
        self,
        request: CatalystRequestDTO,
        interests: Optional[Iterable[str]] = None,
    ) -> CatalystResultDTO:
        interests = _clean_interests(interests)

        if self.client is None:
            logger.warning("No text-generation client configured; using fallback catalyst")
            result = fallback_catalyst(request.task_title)
        else:
            try:
                result = self._request_catalyst(build_prompt(request, interests))
            except Exception:
                logger.exception(f"Catalyst generation failed for task '{request.task_title}'; using fallback")
                result = fallback_catalyst(request.task_title)

        return annotate_relevance(result, request, interests)

    def _request_catalyst(self, prompt: str) -> CatalystResultDTO:
        kwargs = {
            'model': self.model,
            'messages': [
                {'role': 'system', 'content': SYSTEM_PROMPT},
                {'role': 'user', 'content': prompt},
            ],
            'response_format': {'type': 'json_object'},
            'max_tokens': self.max_tokens,
            'temperature': self.temperature,
        }
        if self.timeout is not None:
            kwargs['timeout'] = self.timeout

        response = self.client.chat.completions.create(**kwargs)
        raw = response.choices[0].message.content or "{}"
        payload = CatalystPayload.model_validate(json.loads(raw))

        return CatalystResultDTO(
            content=payload.content or DEFAULT_CONTENT,
            estimated_minutes=payload.estimated_minutes,
            source=CatalystSource.AI,
        )


@lru_cache(maxsize=1)
def get_catalyst_generator() -> CatalystGenerator:
    """
    Process-wide generator built from settings.
    Without OPENAI_API_KEY it has no client and always uses the fallback table.
    """
    client = None
    if settings.OPENAI_API_KEY:
        client = OpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=settings.CATALYST_TIMEOUT_SECONDS,
            max_retries=settings.CATALYST_MAX_RETRIES,
        )

    return CatalystGenerator(
        client=client,
        model=settings.CATALYST_MODEL,
        temperature=settings.CATALYST_TEMPERATURE,
        max_tokens=settings.CATALYST_MAX_TOKENS,
    )
