import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, Field

from workout_tracker.config.config import GEMINI_API_KEY, GEMINI_API_URL
from workout_tracker.errors import AssistantError, ValidationError

logger = logging.getLogger(__name__)

PLAN_INSTRUCTIONS = (
    "Provide the workout plan as a clear, plain text list. "
    "Use numbered days or clear labels for each day. "
    "Each exercise should be a bullet point including sets and reps. "
    "Do NOT include greetings, conversational filler, or disclaimers about AI "
    "limitations. Just output the plan itself."
)


def _words(value: str) -> str:
    return value.replace("_", " ")


class PlanPreferences(BaseModel):
    goal: str = ""  # e.g. "build_muscle", "lose_weight"
    experience: str = ""  # beginner, intermediate, advanced
    equipment: List[str] = Field(default_factory=list)
    frequency: str = ""  # e.g. "3_days"
    duration: str = ""  # e.g. "45_minutes"
    focus_areas: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    def validate_required(self):
        if (
            not self.goal
            or not self.experience
            or not self.equipment
            or not self.frequency
            or not self.duration
        ):
            raise ValidationError(
                "Please fill in all required fields "
                "(Goal, Experience, Equipment, Frequency, Duration)."
            )


def build_prompt(prefs: PlanPreferences) -> str:
    """Render the plan request for the given preferences."""
    lines = [
        "Generate a personalized workout plan based on the following criteria:",
        "",
        f"Primary fitness goal: {_words(prefs.goal)}.",
        f"Current fitness level: {prefs.experience}.",
        "Equipment available: "
        f"{', '.join(_words(item) for item in prefs.equipment) or 'None'}.",
        f"Workout frequency: {_words(prefs.frequency)} per week.",
        f"Approximate duration per session: {_words(prefs.duration)}.",
    ]
    if prefs.focus_areas:
        lines.append(
            "Specific focus areas: "
            f"{', '.join(_words(area) for area in prefs.focus_areas)}."
        )
    if prefs.notes and prefs.notes.strip():
        lines.append(f"Additional preferences/notes: {prefs.notes.strip()}.")
    lines.extend(["", PLAN_INSTRUCTIONS])
    return "\n".join(lines)


class PlanAssistant:
    """Client for the generative model that drafts workout plans."""

    def __init__(self, api_key: Optional[str] = GEMINI_API_KEY, api_url: str = GEMINI_API_URL):
        self.api_key = api_key
        self.api_url = api_url
        self.headers = {"Content-Type": "application/json"}

    def generate_plan(self, prefs: PlanPreferences) -> str:
        """
        Generate a workout plan.

        Args:
            prefs: The user's plan preferences

        Returns:
            The plan as plain text
        """
        prefs.validate_required()
        if not self.api_key:
            raise AssistantError("Assistant API key is missing. Set GEMINI_API_KEY.")

        prompt = build_prompt(prefs)
        logger.info(f"Requesting workout plan ({len(prompt)} prompt characters)")
        payload = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

        try:
            response = requests.post(
                self.api_url,
                headers=self.headers,
                params={"key": self.api_key},
                json=payload,
            )
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Error generating workout plan: {e}")
            raise AssistantError(f"API error: {e}") from e
        except ValueError as e:
            logger.error(f"Assistant returned invalid JSON: {e}")
            raise AssistantError() from e

        plan = self._extract_text(result)
        if not plan:
            logger.error(f"Unexpected assistant response: {result}")
            raise AssistantError("Failed to generate plan: unexpected API response.")
        logger.info("Workout plan generated")
        return plan

    @staticmethod
    def _extract_text(result: Dict[str, Any]) -> Optional[str]:
        candidates = result.get("candidates") or []
        if not candidates:
            return None
        parts = (candidates[0].get("content") or {}).get("parts") or []
        if not parts:
            return None
        return parts[0].get("text")
