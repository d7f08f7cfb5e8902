"""Pytest configuration and shared fixtures."""
import asyncio
import json
from collections.abc import Iterable
from typing import Any

import pytest

from ollama_termui.conversation import ConversationStore, RenderStyle
from ollama_termui.history import HistoryBuffer, InMemoryHistoryStore
from ollama_termui.llm import ChatMessage, ChatProvider, EventStream

# Items of a scripted stream: a line, an exception to raise, or an event to
# wait on before continuing.
Script = list[Any]


def chunk(content: str, second: int = 0, model: str = "test-model") -> str:
    """Build one partial chat response line."""
    return json.dumps({
        "model": model,
        "created_at": f"2024-05-01T12:00:{second:02d}.123456789Z",
        "message": {"role": "assistant", "content": content},
        "done": False,
    })


def done(prompt_tokens: int = 5, completion_tokens: int = 2, model: str = "test-model") -> str:
    """Build the final chat response line."""
    return json.dumps({
        "model": model,
        "created_at": "2024-05-01T12:00:59.000000001Z",
        "message": {"role": "assistant", "content": ""},
        "done": True,
        "prompt_eval_count": prompt_tokens,
        "eval_count": completion_tokens,
        "eval_duration": 123456,
    })


async def _play(script: Script):
    for item in script:
        if isinstance(item, asyncio.Event):
            await item.wait()
            continue
        if isinstance(item, BaseException):
            raise item
        await asyncio.sleep(0)
        yield item


class FakeProvider(ChatProvider):
    """Chat provider replaying scripted streams, one script per call.

    A script that is an exception instance is raised from the call itself.
    """

    def __init__(
        self,
        chats: Iterable[Script | BaseException] = (),
        pulls: Iterable[Script | BaseException] = (),
    ) -> None:
        self._chats = list(chats)
        self._pulls = list(pulls)
        self.requests: list[tuple[str, list[ChatMessage]]] = []
        self.streams: list[EventStream] = []
        self.closed = False

    def _open(self, script: Script | BaseException) -> EventStream:
        if isinstance(script, BaseException):
            raise script
        stream = EventStream(_play(script))
        self.streams.append(stream)
        return stream

    async def chat_stream(self, model, messages, **kwargs) -> EventStream:
        self.requests.append((model, list(messages)))
        return self._open(self._chats.pop(0))

    async def pull_stream(self, model) -> EventStream:
        return self._open(self._pulls.pop(0))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def plain_style():
    """Render style without color or markdown, for stable text assertions."""
    return RenderStyle(markdown=False, color=False)


@pytest.fixture
def history():
    """Session-only history buffer."""
    return HistoryBuffer(max_size=100, store=InMemoryHistoryStore())


@pytest.fixture
def conversation(history, plain_style):
    """Conversation store with plain rendering."""
    return ConversationStore(history=history, style=plain_style, width=80, height=24)


@pytest.fixture
def history_file(tmp_path):
    """Path to a history file inside a not yet existing directory."""
    return tmp_path / "ollama" / "history"
