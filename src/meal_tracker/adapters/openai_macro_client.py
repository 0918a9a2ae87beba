"""OpenAI-compatible chat client for macro estimates (OpenRouter)."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from meal_tracker.errors import EstimationFailedError
from meal_tracker.services.macro_estimation import MacroEstimatorClient


@dataclass
class OpenAIMacroClient(MacroEstimatorClient):
    """Macro estimator backed by chat completions with structured output."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "OpenAIMacroClient":
        """Create a client for an OpenAI-compatible endpoint."""
        return cls(client=AsyncOpenAI(api_key=api_key, base_url=base_url))

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Request a JSON answer matching the schema."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "macro_estimate",
                    "strict": True,
                    "schema": schema,
                },
            },
            temperature=0.3,
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise EstimationFailedError("Estimator returned an empty response")
        try:
            parsed = json.loads(_strip_code_fence(content))
        except json.JSONDecodeError as exc:
            raise EstimationFailedError("Estimator returned invalid JSON") from exc
        if not isinstance(parsed, dict):
            raise EstimationFailedError("Estimator returned invalid JSON")
        return parsed

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.close()


def _strip_code_fence(content: str) -> str:
    """Remove a markdown code fence some models wrap around JSON."""
    text = content.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.rsplit("```", 1)[0]
    return text.strip()
