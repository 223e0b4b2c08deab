from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import vertexai
from dotenv import load_dotenv
from vertexai.generative_models import GenerationConfig, GenerativeModel

from core.records import Priority

load_dotenv()

logger = logging.getLogger(__name__)

LLM_MODEL = os.getenv("LLM_MODEL", "gemini-1.5-flash-001")
GCP_PROJECT = os.getenv("GOOGLE_CLOUD_PROJECT")
GCP_LOCATION = os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1")

FALLBACK_REASONING = "Gagal menganalisis otomatis."

PRIORITY_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "priority": {"type": "STRING", "description": "Priority level: Rendah, Sedang, Tinggi, or Kritis"},
        "reasoning": {"type": "STRING", "description": "Brief reason for the priority assignment"},
    },
    "required": ["priority", "reasoning"],
}


@dataclass(frozen=True)
class PriorityAdvice:
    priority: Priority
    reasoning: str


FALLBACK_ADVICE = PriorityAdvice(priority=Priority.MEDIUM, reasoning=FALLBACK_REASONING)


class AdviceError(ValueError):
    pass


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_advice(text: Optional[str]) -> PriorityAdvice:
    """Decode the model's JSON answer.

    The priority label is matched by substring; when several labels appear the
    most severe one wins, and no match falls back to ``Sedang``.
    """
    if not text or not text.strip():
        raise AdviceError("Empty response from model")
    data = json.loads(_strip_fences(text))
    if not isinstance(data, dict):
        raise AdviceError("Expected a JSON object")
    label = data.get("priority")
    reasoning = data.get("reasoning")
    if not isinstance(label, str) or not isinstance(reasoning, str):
        raise AdviceError("Missing priority or reasoning")

    priority = Priority.MEDIUM
    for level in (Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.CRITICAL):
        if level.value in label:
            priority = level
    return PriorityAdvice(priority=priority, reasoning=reasoning)


def build_prompt(complaint: str, item_name: str, room_name: str) -> str:
    return (
        "Analisis tingkat urgensi perbaikan rumah sakit untuk data berikut:\n"
        f"Item: {item_name}\n"
        f"Ruangan: {room_name}\n"
        f"Komplain: {complaint}\n\n"
        "Tentukan prioritas antara: Rendah, Sedang, Tinggi, Kritis.\n"
        "Berikan alasan singkat dalam bahasa Indonesia."
    )


class PriorityAdvisor:
    """Best-effort priority classification for a single complaint.

    ``advise`` never raises. Subclasses only implement ``_request`` and return
    the raw JSON text; any failure there degrades to ``FALLBACK_ADVICE``.
    """

    fallback = FALLBACK_ADVICE

    def advise(self, complaint: str, item_name: str = "", room_name: str = "") -> PriorityAdvice:
        if not (complaint or "").strip():
            return self.fallback
        try:
            return parse_advice(self._request(complaint, item_name, room_name))
        except Exception:
            logger.exception("Priority analysis failed for item=%r room=%r", item_name, room_name)
            return self.fallback

    def _request(self, complaint: str, item_name: str, room_name: str) -> str:
        raise NotImplementedError


class GeminiPriorityAdvisor(PriorityAdvisor):
    def __init__(
        self,
        model: Optional[Any] = None,
        *,
        model_name: str = LLM_MODEL,
        project: Optional[str] = GCP_PROJECT,
        location: str = GCP_LOCATION,
    ):
        self._model = model
        self.model_name = model_name
        self.project = project
        self.location = location

    def _get_model(self) -> Any:
        if self._model is None:
            vertexai.init(project=self.project, location=self.location)
            self._model = GenerativeModel(self.model_name)
        return self._model

    def _request(self, complaint: str, item_name: str, room_name: str) -> str:
        response = self._get_model().generate_content(
            build_prompt(complaint, item_name, room_name),
            generation_config=GenerationConfig(
                response_mime_type="application/json",
                response_schema=PRIORITY_SCHEMA,
            ),
        )
        return response.text
