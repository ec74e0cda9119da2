from __future__ import annotations

import json
import logging
import re
from typing import Any

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .models import CoursePlan, UserContext

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert planner of date courses in Seoul. Given the user's situation, \
design a date course of exactly 3 steps. Write every text value in Korean.

Interpret the user context as follows:
- companion: 연인 (romantic, atmospheric), 친구 (casual, active), \
혼자 (comfortable, immersive), 동료 (neutral, easy to talk)
- weather: with rain or snow, prefer indoor places
- transport: on foot, keep the steps close to each other
- budget: per person, never exceed it

Constraints:
- Every step must be inside Seoul and the route must be realistic.
- kakao_query must be a keyword likely to find a real place on Kakao Map.
- area must name a station or neighbourhood (e.g. "성수역", "연남동").

Return ONLY valid JSON in this exact format:
{"title": "...", "summary": "...", "steps": [
  {"order": 1, "role": "...", "area": "...", "kakao_query": "...", "description": "..."}
]}"""

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def _extract_json(raw: str) -> dict[str, Any]:
    """Parse the outermost JSON object in ``raw``, ignoring code fences and chatter."""
    text = _FENCE_RE.sub("", raw or "").strip()
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("no JSON object in LLM response")
    parsed = json.loads(text[start:end + 1])
    if not isinstance(parsed, dict):
        raise ValueError("LLM response is not a JSON object")
    return parsed


def _build_user_message(context: UserContext) -> str:
    lines = ["## User Context"]
    for label, value in (
        ("Companion", context.companion),
        ("Mood", context.mood),
        ("Weather", context.weather),
        ("Budget per person (KRW)", context.budget),
        ("Transport", context.transport),
        ("Preferred area", context.region),
    ):
        if value not in (None, ""):
            lines.append(f"- {label}: {value}")
    if len(lines) == 1:
        lines.append("- No preferences given, suggest a popular course.")
    lines.append("\nRespond with JSON only.")
    return "\n".join(lines)


def plan_course(
    context: UserContext,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> CoursePlan | None:
    """
    Ask the Groq LLM for a three-step course plan.

    Returns ``None`` on any failure (disabled, missing key, API error,
    unparsable output, or a plan without steps).
    """
    if not config.enabled or not config.api_key:
        return None

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": _build_user_message(context)},
            ],
            max_tokens=config.max_tokens,
            temperature=0.7,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        plan = CoursePlan(**_extract_json(content))

    except Exception:
        logger.warning("Groq course planning failed", exc_info=True)
        return None

    if not plan.steps:
        logger.warning("Groq course plan has no steps")
        return None

    plan.steps.sort(key=lambda step: step.order)
    return plan
