import json

import pytest

from core.advisor import (
    FALLBACK_ADVICE,
    AdviceError,
    GeminiPriorityAdvisor,
    PriorityAdvice,
    PriorityAdvisor,
    build_prompt,
    parse_advice,
)
from core.records import Priority


class FakeGenerateResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate_content(self, prompt, generation_config=None):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return FakeGenerateResponse(self.text)


@pytest.mark.parametrize(
    "label,expected",
    [
        ("Rendah", Priority.LOW),
        ("Sedang", Priority.MEDIUM),
        ("Prioritas Tinggi", Priority.HIGH),
        ("Kritis", Priority.CRITICAL),
        ("Tinggi atau Kritis", Priority.CRITICAL),
        ("urgent", Priority.MEDIUM),
    ],
)
def test_parse_advice_maps_labels(label, expected):
    advice = parse_advice(json.dumps({"priority": label, "reasoning": "ok"}))
    assert advice == PriorityAdvice(priority=expected, reasoning="ok")


def test_parse_advice_strips_markdown_fences():
    text = '```json\n{"priority": "Tinggi", "reasoning": "Alat vital"}\n```'
    assert parse_advice(text).priority is Priority.HIGH


@pytest.mark.parametrize("text", ["", "   ", None, '{"priority": "Tinggi"}', "[1, 2]"])
def test_parse_advice_rejects_incomplete(text):
    with pytest.raises(AdviceError):
        parse_advice(text)


def test_parse_advice_rejects_invalid_json():
    with pytest.raises(ValueError):
        parse_advice("not json")


def test_gemini_advisor_returns_model_answer():
    model = FakeModel(text=json.dumps({"priority": "Kritis", "reasoning": "Ventilator ICU mati"}))
    advisor = GeminiPriorityAdvisor(model=model)
    advice = advisor.advise("Ventilator mati", "Ventilator", "ICU")
    assert advice.priority is Priority.CRITICAL
    assert advice.reasoning == "Ventilator ICU mati"
    assert "Item: Ventilator" in model.prompts[0]
    assert "Ruangan: ICU" in model.prompts[0]


@pytest.mark.parametrize(
    "model",
    [
        FakeModel(error=RuntimeError("quota exceeded")),
        FakeModel(text="{broken"),
        FakeModel(text=""),
        FakeModel(text=json.dumps({"reasoning": "tanpa prioritas"})),
    ],
)
def test_gemini_advisor_falls_back_on_failure(model):
    advice = GeminiPriorityAdvisor(model=model).advise("Lampu mati", "Lampu", "IGD")
    assert advice == FALLBACK_ADVICE
    assert advice.priority is Priority.MEDIUM
    assert advice.reasoning == "Gagal menganalisis otomatis."


def test_blank_complaint_skips_model():
    model = FakeModel(text=json.dumps({"priority": "Kritis", "reasoning": "x"}))
    assert GeminiPriorityAdvisor(model=model).advise("  ", "Bed", "ICU") == FALLBACK_ADVICE
    assert model.prompts == []


def test_base_advisor_degrades_to_fallback():
    assert PriorityAdvisor().advise("Bocor", "Wastafel", "Rawat Inap") == FALLBACK_ADVICE


def test_build_prompt_lists_levels():
    prompt = build_prompt("Rem macet", "Bed", "ICU")
    assert "Rendah, Sedang, Tinggi, Kritis" in prompt
    assert "Komplain: Rem macet" in prompt
