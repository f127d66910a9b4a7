"""
Composer service - transient input state for the message being authored.
"""

import streamlit as st
from dataclasses import dataclass
from typing import MutableMapping, Optional, Any

from utils.image_encoding import ImageDecodeError, encode_data_uri
from utils.logging_config import get_logger, log_user_interaction


COMPOSER_KEY = "composer"


@dataclass
class ComposerState:
    """Draft text and staged image of the message being authored"""
    draft_text: str = ""
    staged_image: Optional[str] = None  # data URI
    generation: int = 0


class Composer:
    """
    Service for the composer state.

    ``generation`` increases on every clear; the page derives its widget keys
    from it so Streamlit recreates the text input and uploader empty.
    """

    def __init__(self, state: Optional[MutableMapping[str, Any]] = None):
        if state is None:
            state = st.session_state
        self.logger = get_logger(__name__)
        self._state = state
        if COMPOSER_KEY not in self._state:
            self._state[COMPOSER_KEY] = ComposerState()

    @property
    def state(self) -> ComposerState:
        return self._state[COMPOSER_KEY]

    @property
    def draft_text(self) -> str:
        return self.state.draft_text

    @property
    def staged_image(self) -> Optional[str]:
        return self.state.staged_image

    @property
    def generation(self) -> int:
        return self.state.generation

    def widget_key(self, name: str) -> str:
        """Session key for a composer widget in the current generation"""
        return f"composer_{name}_{self.generation}"

    def set_draft_text(self, text: str):
        """Replace the draft text"""
        self.state.draft_text = text

    def stage_image(self, file_bytes: Optional[bytes], mime_type: Optional[str] = None) -> bool:
        """
        Encode uploaded bytes as a data URI and stage it.

        Args:
            file_bytes: Raw bytes from the file picker, None when nothing was picked
            mime_type: Type reported by the uploader, if any

        Returns:
            True if an image was staged; state is untouched otherwise
        """
        if not file_bytes:
            return False

        try:
            data_uri = encode_data_uri(file_bytes, mime_type)
        except ImageDecodeError as e:
            self.logger.warning(f"Ignoring upload that is not an image: {e}")
            return False

        self.state.staged_image = data_uri
        log_user_interaction(self.logger, "image_staged", size_bytes=len(file_bytes))
        return True

    def unstage_image(self):
        """Drop the staged image, keeping the draft text"""
        self.state.staged_image = None

    def has_content(self) -> bool:
        """Whether a send would do anything"""
        return bool(self.draft_text.strip()) or self.staged_image is not None

    def clear(self):
        """Reset draft text and staged image, invalidating current widget keys"""
        stale_keys = [self.widget_key("draft"), self.widget_key("image")]
        self._state[COMPOSER_KEY] = ComposerState(generation=self.generation + 1)
        for key in stale_keys:
            if key in self._state:
                del self._state[key]
