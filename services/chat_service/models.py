"""
Chat service data models for conversations and messages.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class MessageRole(str, Enum):
    """Author of a chat message"""
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """Individual message in a conversation"""
    role: MessageRole
    content: str
    image: Optional[str] = None  # data URI, user messages only
    is_error: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.role == MessageRole.ASSISTANT:
            if self.image is not None:
                raise ValueError("Assistant messages cannot carry an image")
            if not self.content:
                raise ValueError("Assistant messages need reply text")
        elif not self.content and self.image is None:
            raise ValueError("User messages need text or an image")

    @classmethod
    def from_user(cls, content: str, image: Optional[str] = None) -> 'Message':
        return cls(role=MessageRole.USER, content=content, image=image)

    @classmethod
    def from_assistant(cls, content: str, is_error: bool = False) -> 'Message':
        return cls(role=MessageRole.ASSISTANT, content=content, is_error=is_error)


@dataclass(frozen=True)
class PendingSend:
    """Snapshot of a send whose user message is appended but whose reply is not"""
    prompt: str
    image_b64: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return self.image_b64 is not None
