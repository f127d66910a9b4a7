"""
Conversation store - ordered, append-only message history for one browser session.
"""

import streamlit as st
from typing import Any, MutableMapping, Optional, Tuple

from services.chat_service.models import Message, PendingSend
from utils.logging_config import get_logger


CONVERSATION_KEY = "conversation"
PENDING_SENDS_KEY = "pending_sends"


class ConversationStore:
    """
    Append-only message history kept in Streamlit session state.

    The state mapping defaults to ``st.session_state``; tests pass a plain dict.
    Messages are stored in a tuple so readers never see a list they could mutate.
    """

    def __init__(self, state: Optional[MutableMapping[str, Any]] = None):
        if state is None:
            state = st.session_state
        self.logger = get_logger(__name__)
        self._state = state
        if CONVERSATION_KEY not in self._state:
            self._state[CONVERSATION_KEY] = ()
            self.logger.debug("Conversation created")

    @property
    def messages(self) -> Tuple[Message, ...]:
        """Messages in insertion order, oldest first"""
        return self._state[CONVERSATION_KEY]

    def append(self, message: Message) -> Message:
        """Append a message to the end of the conversation"""
        self._state[CONVERSATION_KEY] = self.messages + (message,)
        self.logger.debug(
            f"Appended {message.role.value} message",
            extra={"message_count": len(self), "has_image": message.image is not None}
        )
        return message

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self):
        return iter(self.messages)

    def add_pending_send(self, pending: PendingSend):
        """Queue a begun send whose reply is still to be fetched"""
        self._state[PENDING_SENDS_KEY] = self.pending_sends + (pending,)

    @property
    def pending_sends(self) -> Tuple[PendingSend, ...]:
        """Queued sends, oldest first"""
        return tuple(self._state.get(PENDING_SENDS_KEY, ()))

    def next_pending_send(self) -> Optional[PendingSend]:
        """Oldest queued send, left in the queue until it is dropped"""
        pending = self.pending_sends
        return pending[0] if pending else None

    def drop_pending_send(self):
        """Remove the oldest queued send once its reply has been settled"""
        remaining = self.pending_sends[1:]
        if remaining:
            self._state[PENDING_SENDS_KEY] = remaining
        elif PENDING_SENDS_KEY in self._state:
            del self._state[PENDING_SENDS_KEY]
