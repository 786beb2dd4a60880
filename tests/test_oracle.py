"""Tests for the oracle client and prompts."""
import json
import httpx
import pytest
from aiprobe.config import load_settings
from aiprobe.errors import OracleUnavailable
from aiprobe.services.oracle import OracleClient, parse_oracle_response
from aiprobe.services.prompt import SYSTEM_PROMPTS, build_oracle_messages


def openai_reply(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_client(handler, **overrides) -> OracleClient:
    settings = load_settings(oracle_enabled=True, **overrides)
    return OracleClient(settings, transport=httpx.MockTransport(handler))


class TestParseOracleResponse:
    """Tests for oracle output parsing."""

    def test_bare_integer(self):
        assert parse_oracle_response("73").probability == 73

    def test_leading_number_with_prose(self):
        assert parse_oracle_response("  42 - mostly human").probability == 42

    def test_json_object(self):
        judgment = parse_oracle_response(
            '{"probability": 88, "confidence": "High", "explanations": ["uniform tone"]}'
        )
        assert judgment.probability == 88
        assert judgment.confidence == "High"
        assert judgment.explanations == ["uniform tone"]

    def test_json_in_code_fence(self):
        content = '```json\n{"ai_probability": 12.6}\n```'
        assert parse_oracle_response(content).probability == 13

    @pytest.mark.parametrize("content", ["", "not a number", "150", "-3", '{"probability": 101}'])
    def test_invalid(self, content):
        with pytest.raises(OracleUnavailable):
            parse_oracle_response(content)

    @pytest.mark.parametrize("content", [["not", "a", "string"], {"probability": 50}, 42])
    def test_non_string_content(self, content):
        with pytest.raises(OracleUnavailable, match="shape"):
            parse_oracle_response(content)

    @pytest.mark.parametrize("explanations", [3, None, {"why": "tone"}])
    def test_odd_explanations_ignored(self, explanations):
        content = json.dumps({"probability": 50, "explanations": explanations})
        judgment = parse_oracle_response(content)
        assert judgment.probability == 50
        assert judgment.explanations == []


class TestPrompts:
    """Tests for prompt templates."""

    def test_messages(self):
        messages = build_oracle_messages("Some text.", "en")
        assert messages[0]["role"] == "system"
        assert messages[0]["content"] == SYSTEM_PROMPTS["en"]
        assert "Some text." in messages[1]["content"]

    def test_danish(self):
        messages = build_oracle_messages("Hej.", "da")
        assert messages[0]["content"] == SYSTEM_PROMPTS["da"]
        assert messages[1]["content"].startswith("Tekst:")

    def test_unknown_language_falls_back(self):
        messages = build_oracle_messages("Hi.", "xx")
        assert messages[0]["content"] == SYSTEM_PROMPTS["en"]


class TestOracleClientOpenAI:
    """Wire tests for the OpenAI-compatible backend."""

    @pytest.mark.asyncio
    async def test_judge(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=openai_reply('{"probability": 64}'))

        client = make_client(handler, oracle_base_url="http://oracle.test/v1/", oracle_api_key="k")
        judgment = await client.judge("Some text.", "en")

        assert judgment.probability == 64
        assert seen["url"] == "http://oracle.test/v1/chat/completions"
        assert seen["auth"] == "Bearer k"
        assert seen["body"]["messages"][0]["role"] == "system"

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        client = make_client(lambda request: httpx.Response(429, json={"error": "slow down"}))
        with pytest.raises(OracleUnavailable) as exc_info:
            await client.judge("Some text.")
        assert exc_info.value.reason == "rate limited"

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = make_client(lambda request: httpx.Response(500))
        with pytest.raises(OracleUnavailable, match="HTTP 500"):
            await client.judge("Some text.")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        client = make_client(handler)
        with pytest.raises(OracleUnavailable, match="timeout"):
            await client.judge("Some text.")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        with pytest.raises(OracleUnavailable, match="transport error"):
            await client.judge("Some text.")

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        client = make_client(lambda request: httpx.Response(200, json={"unexpected": True}))
        with pytest.raises(OracleUnavailable, match="shape"):
            await client.judge("Some text.")

    @pytest.mark.asyncio
    async def test_list_content(self):
        reply = openai_reply(["not", "a", "string"])
        client = make_client(lambda request: httpx.Response(200, json=reply))
        with pytest.raises(OracleUnavailable, match="shape"):
            await client.judge("Some text.")

    @pytest.mark.asyncio
    async def test_non_numeric_explanations(self):
        reply = openai_reply('{"probability": 50, "explanations": 3}')
        client = make_client(lambda request: httpx.Response(200, json=reply))
        judgment = await client.judge("Some text.")
        assert judgment.probability == 50
        assert judgment.explanations == []

    @pytest.mark.asyncio
    async def test_out_of_range(self):
        client = make_client(lambda request: httpx.Response(200, json=openai_reply("250")))
        with pytest.raises(OracleUnavailable):
            await client.judge("Some text.")

    @pytest.mark.asyncio
    async def test_check_health(self):
        def handler(request):
            return httpx.Response(200, json={"data": [{"id": "judge-model"}]})

        client = make_client(handler)
        result = await client.check_health()
        assert result["status"] == "connected"
        assert result["models"] == ["judge-model"]

    @pytest.mark.asyncio
    async def test_check_health_disconnected(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        result = await client.check_health()
        assert result["status"] == "disconnected"


class TestOracleClientAnthropic:
    """Wire tests for the Anthropic messages backend."""

    @pytest.mark.asyncio
    async def test_judge(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-api-key")
            seen["version"] = request.headers.get("anthropic-version")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "content": [{"type": "text", "text": "91"}],
            })

        client = make_client(
            handler,
            oracle_backend="anthropic",
            oracle_base_url="https://api.anthropic.test/v1",
            oracle_api_key="secret",
        )
        judgment = await client.judge("Tekst her.", "da")

        assert judgment.probability == 91
        assert seen["url"] == "https://api.anthropic.test/v1/messages"
        assert seen["key"] == "secret"
        assert seen["version"] == "2023-06-01"
        assert seen["body"]["system"] == SYSTEM_PROMPTS["da"]
        assert [m["role"] for m in seen["body"]["messages"]] == ["user"]

    @pytest.mark.asyncio
    async def test_non_dict_content_blocks(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"content": ["91"]}),
            oracle_backend="anthropic",
        )
        with pytest.raises(OracleUnavailable, match="shape"):
            await client.judge("Some text.")
