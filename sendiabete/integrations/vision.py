import base64

import httpx

from sendiabete.core.config import Settings, settings as default_settings
from sendiabete.core.errors import AnalysisUnavailable
from sendiabete.core.logging_config import get_logger

logger = get_logger(__name__)

PROMPT = "Extrait uniquement le chiffre de glycémie. Réponds UNIQUEMENT avec le chiffre."


class VisionAnalyzer:
    """
    Reads the glycemia value off a meter photo through an OpenAI compatible
    chat-completions endpoint.

    ``analyze`` never raises for a failed call while degraded mode is on:
    it logs the failure and answers ``vision_fallback_value`` instead.
    With degraded mode off, failures raise AnalysisUnavailable.
    """

    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings or default_settings
        # tests plug an httpx.MockTransport here
        self._transport = transport

    def _payload(self, image: bytes) -> dict:
        b64 = base64.b64encode(image).decode("ascii")
        return {
            "model": self.settings.vision_model,
            "messages": [{
                "role": "user",
                "content": [
                    {"type": "text", "text": PROMPT},
                    {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{b64}"}},
                ],
            }],
            "max_tokens": 10,
        }

    async def _request(self, image: bytes) -> str:
        if not self.settings.openai_api_key:
            raise RuntimeError("OpenAI API key is not set in configuration.")
        url = f"{self.settings.openai_base_url.rstrip('/')}/chat/completions"
        headers = {"Authorization": f"Bearer {self.settings.openai_api_key}"}
        async with httpx.AsyncClient(timeout=self.settings.vision_timeout_seconds, transport=self._transport) as client:
            r = await client.post(url, json=self._payload(image), headers=headers)
        r.raise_for_status()
        body = r.json()
        return str(body["choices"][0]["message"]["content"]).strip()

    async def analyze(self, image: bytes) -> str:
        try:
            return await self._request(image)
        except Exception as exc:
            if not self.settings.vision_fallback_enabled:
                logger.error("vision_analysis_failed", error=type(exc).__name__)
                raise AnalysisUnavailable() from exc
            logger.warning(
                "vision_analysis_fallback",
                error=type(exc).__name__,
                fallback=self.settings.vision_fallback_value,
            )
            return self.settings.vision_fallback_value
