# =============================================================================
# daycare_core/services/summary_service.py
# AI-written narrative for the daily report
# =============================================================================
"""
SummaryService - turns a day's log into a warm paragraph for parents.

Uses the OpenAI chat completions API when OPENAI_API_KEY is set. Any failure
(missing key, network, API error, empty answer) falls back to the teacher's
own notes so a report can always be composed.
"""

from __future__ import annotations
import os
from typing import Callable, Optional

from daycare_core.offline.models import Child, DailyLog, Parent
from .base_service import BaseService


DEFAULT_MODEL = "gpt-4o-mini"

SYSTEM_PROMPT = (
    "You are a caring daycare teacher writing to a parent. "
    "Write a warm, professional, friendly summary of the child's day. "
    "Focus on positive highlights, keep a supportive tone and write one "
    "or two cohesive paragraphs. Do NOT use markdown formatting."
)


def build_prompt(log: DailyLog, child: Child, language: str = "English") -> str:
    meals = ", ".join(
        f"{m.get('type', '')}: {m.get('items', '')} ({m.get('amount', '')} eaten)"
        for m in log.meals
    )
    naps = ", ".join(
        f"From {n.get('start_time', '')} to {n.get('end_time', '')} (Quality: {n.get('quality', '')})"
        for n in log.naps
    )
    activities = ", ".join(
        f"{a.get('category', '')}: {a.get('description', '')}" for a in log.activities
    )
    lines = [
        f"Child Name: {child.first_name}",
        f"Date: {log.date}",
        f"Mood: {log.overall_mood}",
        f"Meals: {meals or 'none logged'}",
        f"Naps: {naps or 'none logged'}",
        f"Activities: {activities or 'none logged'}",
        f"Raw Teacher Notes: {log.teacher_notes}",
        f"Preferred Language: {language}",
    ]
    if language in ("Urdu", "Punjabi"):
        lines.append(f"Write the narrative in {language}.")
    return "\n".join(lines)


class SummaryService(BaseService):

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        client_factory: Optional[Callable[[str], object]] = None,
    ):
        super().__init__()
        self.api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model = model
        self._client_factory = client_factory

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    def _client(self):
        if self._client_factory is not None:
            return self._client_factory(self.api_key)
        import openai
        return openai.OpenAI(api_key=self.api_key, timeout=30)

    def summarize(self, log: DailyLog, child: Child, parent: Optional[Parent] = None) -> str:
        """AI summary of the day, or the teacher notes unchanged on any failure."""
        if not self.api_key:
            return log.teacher_notes

        language = parent.preferred_language if parent else "English"
        try:
            with self.log_operation(f"Summarizing {log.id}"):
                response = self._client().chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": build_prompt(log, child, language)},
                    ],
                    temperature=0.7,
                    max_tokens=400,
                )
            text = (response.choices[0].message.content or "").strip()
        except Exception as e:
            self.logger.warning(f"AI summary unavailable, using teacher notes: {e}")
            return log.teacher_notes

        return text or log.teacher_notes
