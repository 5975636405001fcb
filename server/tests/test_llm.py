import json
from types import SimpleNamespace

import pytest

from scamscan.core.exceptions import LLMResponseError, MissingAPIKeyError
from scamscan.schemas.schemas import TextAnalysisRequest
from scamscan.services.llm import (
    ListingAnalyzer,
    image_analysis_fallback,
    scan_text_fallback,
    text_analysis_fallback,
)


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(content):
    completions = FakeCompletions(content)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client, completions


LISTING = TextAnalysisRequest(
    title="iPhone 14 Pro",
    description="Brand new, sealed. Wire transfer only.",
    price="$300",
    seller_info="Joined last week",
)


async def test_analyze_text_parses_camel_case_answer():
    client, completions = fake_client(json.dumps({
        "title": "iPhone 14 Pro",
        "scamScore": 82,
        "analysis": "Price far below market and wire transfer requested.",
        "redFlags": [
            {"severity": "high", "description": "Wire transfer only"},
            {"severity": "low", "description": "New account"},
        ],
    }))
    analyzer = ListingAnalyzer(client, model="gpt-test")

    result = await analyzer.analyze_text(LISTING)

    assert result.scam_score == 82
    assert [f.severity for f in result.red_flags] == ["high", "low"]
    call = completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["response_format"] == {"type": "json_object"}
    assert "max_tokens" not in call
    assert "Wire transfer only." in call["messages"][1]["content"]
    assert "Joined last week" in call["messages"][1]["content"]


async def test_analyze_text_fills_placeholders_for_missing_fields():
    client, completions = fake_client('{"scamScore": 10}')

    await ListingAnalyzer(client).analyze_text(TextAnalysisRequest(title="Lamp"))

    prompt = completions.calls[0]["messages"][1]["content"]
    assert "No description provided" in prompt
    assert "Unknown price" in prompt
    assert "No seller information" in prompt


async def test_analyze_text_normalizes_loose_answers():
    client, _ = fake_client(json.dumps({
        "scamScore": 140.6,
        "redFlags": [{"severity": "CRITICAL", "description": "Odd"}],
    }))

    result = await ListingAnalyzer(client).analyze_text(LISTING)

    assert result.scam_score == 100
    assert result.red_flags[0].severity == "medium"


async def test_analyze_image_sends_url_and_token_limit():
    client, completions = fake_client(json.dumps({
        "isStockImage": True,
        "containsText": True,
        "description": "Studio shot with a watermark",
        "suspiciousElements": ["watermark"],
    }))
    analyzer = ListingAnalyzer(client, image_max_tokens=512)

    result = await analyzer.analyze_image("https://img.example/phone.jpg")

    assert result.is_stock_image
    assert result.suspicious_elements == ["watermark"]
    call = completions.calls[0]
    assert call["max_tokens"] == 512
    parts = call["messages"][1]["content"]
    assert parts[1] == {"type": "image_url", "image_url": {"url": "https://img.example/phone.jpg"}}


async def test_missing_client_raises():
    analyzer = ListingAnalyzer(None)

    with pytest.raises(MissingAPIKeyError):
        await analyzer.analyze_text(LISTING)
    with pytest.raises(MissingAPIKeyError):
        await analyzer.analyze_image("https://img.example/a.jpg")


async def test_null_flag_description_keeps_the_answer():
    client, _ = fake_client(json.dumps({
        "scamScore": 70,
        "redFlags": [{"severity": "high", "description": None}],
    }))

    result = await ListingAnalyzer(client).analyze_text(LISTING)

    assert result.scam_score == 70
    assert [(f.severity, f.description) for f in result.red_flags] == [("high", "Unknown issue")]


@pytest.mark.parametrize("content", [None, "", "not json", '{"scamScore": "high"}'])
async def test_bad_model_output_raises(content):
    client, _ = fake_client(content)

    with pytest.raises(LLMResponseError):
        await ListingAnalyzer(client).analyze_text(LISTING)


def test_fallbacks():
    text = text_analysis_fallback()
    assert text.title == "Analysis unavailable"
    assert text.scam_score == 50
    assert [f.description for f in text.red_flags] == ["Analysis failed due to technical issues"]

    scan_text = scan_text_fallback("Bike")
    assert (scan_text.title, scan_text.scam_score, scan_text.red_flags) == ("Bike", 50, [])

    image = image_analysis_fallback("Image analysis unavailable")
    assert not image.is_stock_image
    assert image.description == "Image analysis unavailable"
