"""
OpenAI-backed parcel reviewer.
"""

import json
import os
from typing import Sequence

from openai import OpenAI

from parcel_intake.core.models import AIAnalysisResult, Parcel
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

SYSTEM_PROMPT = """
You are an expert logistics coordinator. Review bulk parcel upload data for a merchant.
Identify potential delivery issues such as:
1. Incomplete or suspicious addresses.
2. Mismatched service types for weight.
3. Missing critical recipient details.

Return ONLY a JSON object with this shape:
{
  "summary": "string",
  "recommendations": ["string"],
  "correctedParcels": [
    {"id": "parcel id from the input", "issue": "string", "suggestedAddress": "string (optional)"}
  ]
}
Only list parcels that have an issue.
"""


class OpenAIParcelAnalyzer:
    """
    Reviews parcels with an OpenAI chat model in JSON mode.

    Configuration comes from the environment: OPENAI_API_KEY and,
    optionally, PARCEL_AI_MODEL.
    """

    def __init__(self, api_key: str | None = None, model: str | None = None, client: OpenAI | None = None):
        self.model = model or os.getenv("PARCEL_AI_MODEL", DEFAULT_MODEL)
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self._api_key:
                raise ValueError("OPENAI_API_KEY not found in environment.")
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def analyze(self, parcels: Sequence[Parcel]) -> AIAnalysisResult:
        """
        Send the parcel list for review.

        Raises:
            ValueError: If the API key is missing or the reply is not valid JSON
        """
        payload = json.dumps([p.model_dump(mode="json") for p in parcels], indent=2)
        logger.info("Requesting AI review", extra={"parcel_count": len(parcels), "model": self.model})

        response = self.client.chat.completions.create(
            model=self.model,
            response_format={"type": "json_object"},
            temperature=0.0,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"Parcel Data:\n{payload}"},
            ],
        )

        content = response.choices[0].message.content or ""
        try:
            return AIAnalysisResult.model_validate(json.loads(content))
        except json.JSONDecodeError as e:
            raise ValueError(f"AI review returned malformed JSON: {e}") from e
