"""Conversation module for ollama-termui.

Keeps the exchanges of a chat, projects them into messages for the chat
service and renders them as transcript text.
"""

from .models import Exchange, RenderStyle
from .rendering import render_message
from .store import ConversationStore, MessageView

__all__ = [
    "ConversationStore",
    "Exchange",
    "MessageView",
    "RenderStyle",
    "render_message",
]
