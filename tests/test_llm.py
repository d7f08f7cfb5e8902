"""Unit tests for the llm module."""
import json
from datetime import datetime, timezone

import httpx
import pytest

from ollama_termui.llm import (
    ChatError,
    ChatMessage,
    ChatProvider,
    EventStream,
    OllamaProvider,
    ProtocolError,
    TransportError,
    create_chat_provider,
    decode_event,
    decode_pull_status,
)

BASE_URL = "http://ollama.test"


def make_provider(handler) -> OllamaProvider:
    return OllamaProvider(base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestChatProvider:
    """Tests for ChatProvider interface and factory."""

    def test_chat_provider_is_abstract(self):
        """Test that ChatProvider cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ChatProvider()  # type: ignore

    def test_factory_creates_ollama(self):
        provider = create_chat_provider("ollama", base_url="http://localhost:11434/")

        assert isinstance(provider, OllamaProvider)
        assert provider.base_url == "http://localhost:11434"

    def test_factory_rejects_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_chat_provider("openai")


class TestDecoding:
    """Tests for stream line decoding."""

    def test_decode_partial_event(self):
        event = decode_event(
            '{"model":"m","created_at":"2024-05-01T12:00:00.123456789Z",'
            '"message":{"role":"assistant","content":"Hi"},"done":false}'
        )

        assert event.content == "Hi"
        assert not event.done
        assert event.created_at == datetime(2024, 5, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)

    def test_decode_final_event_usage(self):
        event = decode_event('{"done":true,"prompt_eval_count":3,"eval_count":9}')

        assert event.done
        assert event.content == ""
        assert event.usage() == {"prompt_tokens": 3, "completion_tokens": 9}

    def test_decode_error_event(self):
        assert decode_event('{"error":"out of memory"}').error == "out of memory"

    def test_unknown_fields_are_ignored(self):
        event = decode_event('{"message":{"role":"assistant","content":"x"},"total_duration":5}')

        assert event.content == "x"

    @pytest.mark.parametrize("line", ["{oops", "[]", "42", '{"done": "maybe"}'])
    def test_malformed_event(self, line):
        with pytest.raises(ProtocolError, match="Malformed stream event"):
            decode_event(line)

    def test_decode_pull_status(self):
        status = decode_pull_status(
            '{"status":"pulling abc","digest":"sha256:abc","total":200,"completed":50}'
        )

        assert status.digest == "sha256:abc"
        assert status.fraction == 0.25

    def test_pull_status_without_total(self):
        assert decode_pull_status('{"status":"pulling manifest"}').fraction == 0.0

    def test_malformed_pull_status(self):
        with pytest.raises(ProtocolError, match="Malformed pull status"):
            decode_pull_status("nope")


class TestErrors:
    """Tests for the error hierarchy."""

    def test_codes(self):
        assert TransportError("x").code == "TRANSPORT_ERROR"
        assert ProtocolError("x").code == "PROTOCOL_ERROR"
        assert ChatError("x").code == "CHAT_ERROR"

    def test_message_and_status(self):
        error = ProtocolError("model not found", http_status=404)

        assert str(error) == "model not found"
        assert error.http_status == 404
        assert isinstance(error, ChatError)


class TestEventStream:
    """Tests for EventStream lifecycle."""

    @pytest.mark.asyncio
    async def test_close_is_idempotent_and_stops_iteration(self):
        closes = []

        async def lines():
            yield "a"
            yield "b"

        async def close():
            closes.append(True)

        stream = EventStream(lines(), close)
        assert await stream.__anext__() == "a"

        await stream.aclose()
        await stream.aclose()

        assert stream.closed
        assert closes == [True]
        assert [line async for line in stream] == []


class TestOllamaProvider:
    """Tests for OllamaProvider against a mocked transport."""

    @pytest.mark.asyncio
    async def test_chat_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b'{"done":true}\n')

        provider = make_provider(handler)
        messages = [
            ChatMessage(role="user", content="hi"),
            ChatMessage(role="assistant", content="hello"),
            ChatMessage(role="user", content="how are you"),
        ]

        stream = await provider.chat_stream("llama3.2", messages)
        await stream.aclose()
        await provider.close()

        assert seen["url"] == f"{BASE_URL}/api/chat"
        assert seen["body"] == {
            "model": "llama3.2",
            "messages": [
                {"role": "user", "content": "hi"},
                {"role": "assistant", "content": "hello"},
                {"role": "user", "content": "how are you"},
            ],
        }

    @pytest.mark.asyncio
    async def test_chat_streams_lines(self):
        body = b'{"message":{"role":"assistant","content":"a"}}\n{"done":true}\n'

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=body)

        async with make_provider(handler) as provider:
            stream = await provider.chat_stream("m", [ChatMessage(role="user", content="x")])
            try:
                lines = [line async for line in stream]
            finally:
                await stream.aclose()

        assert [decode_event(line).done for line in lines] == [False, True]

    @pytest.mark.asyncio
    async def test_error_body_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "model 'nope' not found"})

        async with make_provider(handler) as provider:
            with pytest.raises(ProtocolError) as exc_info:
                await provider.chat_stream("nope", [])

        assert str(exc_info.value) == "model 'nope' not found"
        assert exc_info.value.http_status == 404

    @pytest.mark.asyncio
    async def test_error_body_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="internal failure")

        async with make_provider(handler) as provider:
            with pytest.raises(ProtocolError, match="internal failure"):
                await provider.chat_stream("m", [])

    @pytest.mark.asyncio
    async def test_error_without_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with make_provider(handler) as provider:
            with pytest.raises(ProtocolError, match="503 Service Unavailable"):
                await provider.chat_stream("m", [])

    @pytest.mark.asyncio
    async def test_connection_failure_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_provider(handler) as provider:
            with pytest.raises(TransportError, match="connection refused"):
                await provider.chat_stream("m", [])

    @pytest.mark.asyncio
    async def test_pull_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, content=b'{"status":"success"}\n')

        async with make_provider(handler) as provider:
            stream = await provider.pull_stream("llama3.2")
            lines = [line async for line in stream]
            await stream.aclose()

        assert seen == {"path": "/api/pull", "body": {"model": "llama3.2"}}
        assert decode_pull_status(lines[0]).status == "success"
