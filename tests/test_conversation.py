"""Unit tests for the conversation module."""
import pytest

from ollama_termui.conversation import ConversationStore, Exchange, RenderStyle, render_message
from ollama_termui.conversation import rendering
from ollama_termui.conversation.rendering import make_console, wrap_width
from ollama_termui.llm import ChatMessage


class TestExchange:
    """Tests for Exchange lifecycle."""

    def test_new_exchange_is_open(self):
        exchange = Exchange("hi")

        assert exchange.user_text == "hi"
        assert exchange.assistant_text == ""
        assert not exchange.closed

    def test_append_extends_reply(self):
        exchange = Exchange("hi")

        assert exchange.append("Hel")
        assert exchange.append("lo")
        assert exchange.assistant_text == "Hello"

    def test_complete_then_cancel_is_ignored(self):
        exchange = Exchange("hi")

        assert exchange.mark_complete()
        assert not exchange.mark_cancelled()
        assert exchange.complete
        assert not exchange.cancelled

    def test_cancel_then_complete_is_ignored(self):
        exchange = Exchange("hi")

        assert exchange.mark_cancelled()
        assert not exchange.mark_complete()
        assert exchange.cancelled

    def test_closed_exchange_rejects_text(self):
        exchange = Exchange("hi")
        exchange.append("partial")
        exchange.mark_cancelled()

        assert not exchange.append(" more")
        assert exchange.assistant_text == "partial"

    def test_messages(self):
        exchange = Exchange("hi")
        exchange.append("yo")

        assert exchange.user_message == ChatMessage(role="user", content="hi")
        assert exchange.assistant_message == ChatMessage(role="assistant", content="yo")


class TestRenderStyle:
    """Tests for RenderStyle labels."""

    def test_labels(self):
        style = RenderStyle()

        assert style.label_for("user") == "User: "
        assert style.label_for("assistant") == "Assistant: "
        assert style.label_for("system") == "System: "


class TestRendering:
    """Tests for message rendering."""

    def test_wrap_width_leaves_margin(self):
        assert wrap_width(100) == 96

    def test_wrap_width_defaults_when_unknown(self):
        assert wrap_width(0) == 76

    def test_wrap_width_has_a_floor(self):
        assert wrap_width(10) == 20

    def test_render_plain_message(self, plain_style):
        console = make_console(40, plain_style)

        text = render_message(ChatMessage(role="user", content="hello"), console, plain_style)

        assert text == "User:\nhello\n"

    def test_render_wraps_to_console_width(self, plain_style):
        console = make_console(20, plain_style)
        content = "word " * 12

        text = render_message(ChatMessage(role="assistant", content=content), console, plain_style)

        assert all(len(line) <= 20 for line in text.splitlines())

    def test_render_markdown(self):
        style = RenderStyle(color=False)
        console = make_console(40, style)

        text = render_message(ChatMessage(role="assistant", content="**bold** text"), console, style)

        assert "bold text" in text
        assert "**" not in text

    def test_render_falls_back_to_raw_text(self, monkeypatch):
        def _broken(*args, **kwargs):
            raise RuntimeError("renderer exploded")

        monkeypatch.setattr(rendering, "Markdown", _broken)
        style = RenderStyle(color=False)
        console = make_console(40, style)

        text = render_message(ChatMessage(role="assistant", content="**raw**"), console, style)

        assert text == "Assistant: **raw**\n"


class TestConversationStore:
    """Tests for ConversationStore."""

    def test_add_opens_exchange_and_records_history(self, conversation):
        exchange = conversation.add("hello")

        assert conversation.last_exchange is exchange
        assert len(conversation) == 1
        assert conversation.history.entries == ["hello"]

    def test_append_without_exchange_is_a_no_op(self, conversation):
        assert not conversation.append_assistant_text("orphan")
        assert len(conversation) == 0

    def test_append_to_closed_exchange_is_a_no_op(self, conversation):
        conversation.add("hello")
        conversation.complete()

        assert not conversation.append_assistant_text("late")
        assert conversation.last_exchange.assistant_text == ""

    def test_messages_skip_cancelled_exchanges(self, conversation):
        conversation.add("first")
        conversation.append_assistant_text("one")
        conversation.complete()
        conversation.add("second")
        conversation.append_assistant_text("partial")
        conversation.cancel()
        conversation.add("third")

        messages = list(conversation.messages())

        assert messages == [
            ChatMessage(role="user", content="first"),
            ChatMessage(role="assistant", content="one"),
            ChatMessage(role="user", content="third"),
        ]

    def test_messages_view_is_restartable(self, conversation):
        conversation.add("first")
        view = conversation.messages()

        assert list(view) == list(view)

        conversation.add("second")
        assert len(list(view)) == 2

    def test_empty_reply_is_not_sent(self, conversation):
        conversation.add("hello")
        conversation.complete()

        assert list(conversation.messages()) == [ChatMessage(role="user", content="hello")]

    def test_cancel_after_complete_is_ignored(self, conversation):
        conversation.add("hello")
        conversation.append_assistant_text("hi")
        conversation.complete()
        conversation.cancel()

        assert conversation.last_exchange.complete
        assert not conversation.last_exchange.cancelled

    def test_reset_keeps_history(self, conversation):
        conversation.add("hello")
        conversation.reset()

        assert len(conversation) == 0
        assert conversation.render() == ""
        assert conversation.history.entries == ["hello"]

    def test_view_taken_before_reset_follows_new_exchanges(self, conversation):
        conversation.add("old")
        view = conversation.messages()

        conversation.reset()
        assert list(view) == []

        conversation.add("fresh")
        assert list(view) == [ChatMessage(role="user", content="fresh")]

    def test_render_shows_cancelled_partial_reply(self, conversation):
        conversation.add("hello")
        conversation.append_assistant_text("partial")
        conversation.cancel()

        assert conversation.render() == "User:\nhello\n\nAssistant:\npartial\n"

    def test_render_is_cached_until_change(self, conversation):
        conversation.add("hello")
        first = conversation.render()

        assert conversation.render() is first

        conversation.append_assistant_text("hi")
        assert conversation.render() is not first
        assert "hi" in conversation.render()

    def test_resize_rewraps(self, history, plain_style):
        store = ConversationStore(history=history, style=plain_style, width=80)
        store.add("word " * 20)
        wide = store.render()

        store.set_width(30)
        narrow = store.render()

        assert len(narrow.splitlines()) > len(wide.splitlines())

    def test_height_is_capped_by_viewport(self, history, plain_style):
        store = ConversationStore(history=history, style=plain_style, width=80, height=3)
        for i in range(5):
            store.add(f"message {i}")

        assert store.height() == 3

    @pytest.mark.parametrize("text", ["", "plain", "# heading"])
    def test_render_ends_with_newline(self, conversation, text):
        conversation.add(text or " ")

        assert conversation.render().endswith("\n")
