"""Oracle client for external AI-probability judgments.

Talks to either an OpenAI-compatible chat endpoint (vLLM, Ollama, LM Studio
or a hosted API) or the Anthropic messages API. Every failure mode (network
error, non-2xx, rate limit, timeout, unparseable or out-of-range answer) is
reported as OracleUnavailable so the pipeline can degrade to local fusion.

Anything with an `async judge(text, language) -> OracleJudgment` method can
stand in for OracleClient.
"""
import httpx
import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Optional

from aiprobe.config import Settings, get_settings
from aiprobe.errors import OracleUnavailable
from aiprobe.services.prompt import build_oracle_messages

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
PROBABILITY_KEYS = ("probability", "ai_probability", "aiProbability", "score")
EXPLANATION_KEYS = ("explanations", "reasons", "explanation")

_JSON_OBJECT = re.compile(r'\{.*\}', re.DOTALL)
_LEADING_NUMBER = re.compile(r'^\s*(-?\d+(?:\.\d+)?)')


@dataclass
class OracleJudgment:
    """One oracle answer."""
    probability: int
    confidence: Optional[str] = None
    explanations: list[str] = field(default_factory=list)


def _to_probability(value) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise OracleUnavailable(f"Non-numeric probability: {value!r}") from None
    if not math.isfinite(number) or not 0 <= number <= 100:
        raise OracleUnavailable(f"Probability out of range: {value!r}")
    return int(math.floor(number + 0.5))


def parse_oracle_response(content: str) -> OracleJudgment:
    """Parse oracle output into a judgment.

    Accepts a JSON judgment object (possibly wrapped in prose or a code
    fence) or text starting with a number.

    Raises:
        OracleUnavailable: If no probability in [0, 100] can be read
    """
    if content is None:
        content = ""
    if not isinstance(content, str):
        raise OracleUnavailable("unexpected response shape")
    content = content.strip()

    match = _JSON_OBJECT.search(content)
    if match:
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            for key in PROBABILITY_KEYS:
                if key in data:
                    explanations = next(
                        (data[k] for k in EXPLANATION_KEYS if k in data), []
                    )
                    if isinstance(explanations, str):
                        explanations = [explanations]
                    elif not isinstance(explanations, list):
                        explanations = []
                    confidence = data.get("confidence")
                    return OracleJudgment(
                        probability=_to_probability(data[key]),
                        confidence=str(confidence) if confidence is not None else None,
                        explanations=[str(e) for e in explanations],
                    )

    match = _LEADING_NUMBER.match(content)
    if match:
        return OracleJudgment(probability=_to_probability(match.group(1)))

    raise OracleUnavailable(f"Unparseable oracle response: {content[:80]!r}")


class OracleClient:
    """HTTP oracle over httpx.

    Backends:
    - openai: POST {base_url}/chat/completions with a Bearer key
    - anthropic: POST {base_url}/messages with x-api-key
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self._backend = self.settings.oracle_backend
        self._base_url = self.settings.oracle_base_url.rstrip("/")
        self._model = self.settings.oracle_model
        self._transport = transport

        logger.info(f"Oracle client initialized: backend={self._backend}, url={self._base_url}")

    def _client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout if timeout is not None else self.settings.oracle_timeout_s,
            transport=self._transport,
        )

    def _request(self, messages: list[dict]) -> tuple[str, dict, dict]:
        """Build (url, headers, payload) for the configured backend."""
        s = self.settings
        if self._backend == "anthropic":
            system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
            payload = {
                "model": self._model,
                "max_tokens": s.oracle_max_tokens,
                "temperature": s.oracle_temperature,
                "messages": [m for m in messages if m["role"] != "system"],
            }
            if system:
                payload["system"] = system
            headers = {
                "x-api-key": s.oracle_api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            }
            return f"{self._base_url}/messages", headers, payload

        payload = {
            "model": self._model,
            "messages": messages,
            "temperature": s.oracle_temperature,
            "max_tokens": s.oracle_max_tokens,
        }
        headers = {"Authorization": f"Bearer {s.oracle_api_key}"}
        return f"{self._base_url}/chat/completions", headers, payload

    def _extract_content(self, data: dict) -> str:
        if self._backend == "anthropic":
            return "".join(
                block.get("text", "")
                for block in data["content"]
                if block.get("type", "text") == "text"
            )
        return data["choices"][0]["message"]["content"]

    async def judge(self, text: str, language: str = "en") -> OracleJudgment:
        """Ask the oracle for an AI probability.

        Args:
            text: Text to judge
            language: Lexicon language, selects the prompt

        Returns:
            OracleJudgment with probability in [0, 100]

        Raises:
            OracleUnavailable: On any transport, HTTP or parsing failure
        """
        url, headers, payload = self._request(build_oracle_messages(text, language))

        try:
            async with self._client() as client:
                resp = await client.post(url, json=payload, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except httpx.TimeoutException:
            raise OracleUnavailable("timeout") from None
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            reason = "rate limited" if status == 429 else f"HTTP {status}"
            raise OracleUnavailable(reason) from None
        except httpx.HTTPError as e:
            raise OracleUnavailable(f"transport error: {e}") from None
        except ValueError:
            raise OracleUnavailable("response body is not JSON") from None

        try:
            content = self._extract_content(data)
        except (KeyError, IndexError, TypeError, AttributeError):
            raise OracleUnavailable("unexpected response shape") from None

        return parse_oracle_response(content)

    async def check_health(self) -> dict:
        """Check if the oracle server is reachable.

        Returns:
            Dictionary with status and backend
        """
        if self._backend == "anthropic":
            # No cheap unauthenticated probe; report configuration only
            return {"status": "configured", "backend": self._backend}

        async with self._client(timeout=5.0) as client:
            try:
                resp = await client.get(f"{self._base_url}/models")
                if resp.status_code == 200:
                    models = resp.json().get("data", [])
                    return {
                        "status": "connected",
                        "backend": self._backend,
                        "models": [m.get("id") for m in models],
                    }
            except httpx.ConnectError:
                return {
                    "status": "disconnected",
                    "backend": self._backend,
                    "error": f"Cannot connect to {self._backend} server at {self._base_url}",
                }
            except (httpx.HTTPError, ValueError) as e:
                return {"status": "error", "backend": self._backend, "error": str(e)}
        return {"status": "disconnected", "backend": self._backend}
