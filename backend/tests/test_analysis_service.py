import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from signaldesk.exceptions import AnalysisError, ConfigurationError
from signaldesk.services.analysis_service import AnalysisService, parse_analysis

VALID_RESPONSE = {
    "patterns": ["Engolfo de alta"],
    "trend": "Alta",
    "indicators": {"rsi": "Neutro (52)", "volume": "Acima da média"},
    "recommendation": "ALTA",
    "confidenceScore": 82,
    "summary": "Engolfo de alta com volume forte acima das EMAs.",
}


def _service_returning(text):
    client = MagicMock()
    client.models.generate_content.return_value = SimpleNamespace(text=text)
    factory = MagicMock(return_value=client)
    return AnalysisService(api_key="test-key", model="gemini-test", client_factory=factory), client, factory


def test_successful_analysis():
    service, client, factory = _service_returning(json.dumps(VALID_RESPONSE))

    result = service.analyze_chart_image(b"\x89PNG fake", mime_type="image/png")

    factory.assert_called_once_with(api_key="test-key")
    assert result.patterns == ["Engolfo de alta"]
    assert result.indicators.rsi == "Neutro (52)"
    assert result.recommendation == "ALTA"
    assert result.confidence_score == 82

    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["config"].response_mime_type == "application/json"
    assert kwargs["config"].response_schema.required == [
        "patterns",
        "trend",
        "indicators",
        "recommendation",
        "confidenceScore",
        "summary",
    ]
    image_part, prompt = kwargs["contents"]
    assert image_part.inline_data.data == b"\x89PNG fake"
    assert image_part.inline_data.mime_type == "image/png"
    assert "candlestick" in prompt


def test_result_serialises_with_camel_case():
    result = parse_analysis(json.dumps(VALID_RESPONSE))
    assert result.model_dump(by_alias=True)["confidenceScore"] == 82


def test_missing_key_raises_at_call_time():
    factory = MagicMock()
    service = AnalysisService(api_key="", client_factory=factory)
    with pytest.raises(ConfigurationError):
        service.analyze_chart_image(b"img")
    factory.assert_not_called()


@pytest.mark.parametrize("text", [None, "", "not json", json.dumps({"trend": "Alta"})])
def test_unusable_response(text):
    service, _, _ = _service_returning(text)
    with pytest.raises(AnalysisError):
        service.analyze_chart_image(b"img")


def test_empty_image():
    service, client, _ = _service_returning(json.dumps(VALID_RESPONSE))
    with pytest.raises(AnalysisError):
        service.analyze_chart_image(b"")
    client.models.generate_content.assert_not_called()


def test_api_error_is_wrapped():
    service, client, _ = _service_returning(None)
    client.models.generate_content.side_effect = RuntimeError("quota exceeded")
    with pytest.raises(AnalysisError, match="Falha ao analisar a imagem") as excinfo:
        service.analyze_chart_image(b"img")
    assert excinfo.value.context["cause"] == "quota exceeded"
