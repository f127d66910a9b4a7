"""
Chat service - conversation history and the send workflow.
"""

from .conversation_store import ConversationStore
from .models import Message, MessageRole, PendingSend

__all__ = [
    'ConversationStore',
    'Message',
    'MessageRole',
    'PendingSend'
]
