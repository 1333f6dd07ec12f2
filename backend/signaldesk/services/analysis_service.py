from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from ..exceptions import AnalysisError, ConfigurationError
from ..schemas import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

USER_FACING_ERROR = "Falha ao analisar a imagem. Verifique sua conexão ou tente novamente."

CHART_ANALYSIS_PROMPT = """
Você é um analista de criptomoedas especializado em padrões de candlestick e
indicadores técnicos. Analise a imagem do gráfico de negociação enviada,
usando APENAS o que está visível nela.

1. Padrões de candlestick: engolfo de alta/baixa, martelo / martelo invertido,
   doji, estrela da manhã / estrela da noite, três soldados brancos / três
   corvos negros, ou uma sequência de velas de baixa seguida de uma forte vela
   de alta. Sem padrão claro, responda "Nenhum padrão claro".
2. Tendência pelas EMAs: se visíveis, diga se a EMA curta está acima ou abaixo
   da longa e classifique a tendência como "Alta" ou "Baixa"; caso contrário,
   "EMAs não visíveis".
3. RSI: sobrevendido (abaixo de 30), sobrecomprado (acima de 70) ou neutro.
4. Volume: acima ou abaixo da média, principalmente nos movimentos fortes.
5. Recomendação final: "ALTA" (compra forte), "BAIXA" (venda forte) ou
   "AGUARDAR" (sinal incerto ou neutro).
6. Pontuação de confiança de 0 a 100: alta quando padrões e indicadores se
   alinham, baixa quando os sinais são fracos ou conflitantes.
7. Resumo: uma frase em português explicando a recomendação.
"""

# Output contract enforced by the model (JSON mode).
ANALYSIS_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "patterns": types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)),
        "trend": types.Schema(type=types.Type.STRING),
        "indicators": types.Schema(
            type=types.Type.OBJECT,
            properties={
                "rsi": types.Schema(type=types.Type.STRING),
                "volume": types.Schema(type=types.Type.STRING),
            },
            required=["rsi", "volume"],
        ),
        "recommendation": types.Schema(type=types.Type.STRING),
        "confidenceScore": types.Schema(type=types.Type.NUMBER),
        "summary": types.Schema(type=types.Type.STRING),
    },
    required=["patterns", "trend", "indicators", "recommendation", "confidenceScore", "summary"],
)


def parse_analysis(text: Optional[str]) -> AnalysisResult:
    """Parse the JSON body returned by the model."""
    if not text:
        raise AnalysisError("Failed to generate analysis content.")
    try:
        return AnalysisResult.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as e:
        raise AnalysisError(f"Unparsable analysis response: {e}") from e


class AnalysisService:
    """
    Chart screenshot analysis through the Gemini API.

    There is no mock for this feature: every failure is raised.
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        client_factory: Callable[..., Any] = genai.Client,
    ):
        self.api_key = api_key
        self.model = model
        self._client_factory = client_factory
        self._client: Any = None

    def _get_client(self) -> Any:
        # The key is checked at call time so the app can start without it.
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured; chart analysis is unavailable")
        if self._client is None:
            self._client = self._client_factory(api_key=self.api_key)
        return self._client

    def analyze_chart_image(self, image: bytes, mime_type: str = "image/png") -> AnalysisResult:
        """
        Send the chart image and the analysis prompt, return the parsed reading.

        Raises:
            ConfigurationError: no API key.
            AnalysisError: empty image, failed call or unusable response.
        """
        client = self._get_client()
        if not image:
            raise AnalysisError("Empty image")

        try:
            response = client.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=image, mime_type=mime_type),
                    CHART_ANALYSIS_PROMPT,
                ],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=ANALYSIS_RESPONSE_SCHEMA,
                ),
            )
        except Exception as e:
            logger.error("Error analyzing chart image: %s", e)
            raise AnalysisError(USER_FACING_ERROR, {"cause": str(e)}) from e

        result = parse_analysis(response.text)
        logger.info(
            "Chart analysed: recommendation=%s confidence=%.0f",
            result.recommendation,
            result.confidence_score,
        )
        return result
