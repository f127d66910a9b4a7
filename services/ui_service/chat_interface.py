"""
Chat interface service - renders the conversation, the composer and the image preview.
"""

import re

import streamlit as st
from typing import Callable, Iterable, Optional

from config.app_config import AppConfig, get_config
from services.chat_service.models import Message
from services.ui_service.composer import Composer
from utils.image_encoding import ImageDecodeError, split_data_uri
from utils.logging_config import get_logger


COMPOSER_FORM_KEY = "composer_form"

# Characters Streamlit markdown would otherwise interpret
_MARKDOWN_SPECIAL = re.compile(r"([\\`*_{}\[\]()#+\-.!|>~<$:])")

CHAT_STYLES = """
<style>
/* User messages on the right, assistant messages on the left */
.stChatMessage:has([data-testid="stChatMessageAvatarUser"]) {
    flex-direction: row-reverse;
    text-align: right;
}

.stChatMessage {
    margin-bottom: 0.5rem;
}

.composer-preview-title {
    font-weight: 600;
    margin-top: 0.5rem;
}
</style>
"""


def escape_markdown(text: str) -> str:
    """Escape text so st.markdown shows it literally"""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


class ChatInterface:
    """
    Service for chat interface components.
    Rendering is a pure function of the conversation and composer state.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.logger = get_logger(__name__)
        self.config = config or get_config()

    def inject_styles(self):
        st.markdown(CHAT_STYLES, unsafe_allow_html=True)

    def render_chat_messages(self, messages: Iterable[Message]):
        """Render chat messages in insertion order"""
        for message in messages:
            self.render_message(message)

    def render_message(self, message: Message):
        """Render a single message with its inline image, if any"""
        with st.chat_message(message.role.value):
            label = f"**{message.role.value}:**"
            if message.is_error:
                st.error(f"{label} {escape_markdown(message.content)}")
            elif message.content:
                st.markdown(f"{label} {escape_markdown(message.content)}")
            else:
                st.markdown(label)

            if message.image is not None:
                self.render_image(message.image, caption="uploaded")

    def render_image(self, data_uri: str, caption: Optional[str] = None):
        """Render a data-URI image at the configured width"""
        try:
            _, image_bytes = split_data_uri(data_uri)
        except ImageDecodeError as e:
            self.logger.warning(f"Cannot display image: {e}")
            st.caption("Image unavailable")
            return
        st.image(image_bytes, caption=caption, width=self.config.ui.image_max_width)

    def render_empty_state(self):
        st.caption(self.config.ui.empty_state_caption)

    def render_composer(self, composer: Composer, on_send: Callable[[], None]):
        """
        Render the text input, send button and file picker.

        The text input and send button share a form, so Enter in the text
        input submits it the same way the button does. The file picker sits
        outside the form so a staged image previews as soon as it is picked.
        Widget keys come from the composer generation so a cleared composer
        gets fresh, empty widgets on the next run.
        """
        ui = self.config.ui

        with st.form(COMPOSER_FORM_KEY, border=False):
            text_col, button_col = st.columns([5, 1], vertical_alignment="bottom")

            with text_col:
                st.text_input(
                    "Message",
                    key=composer.widget_key("draft"),
                    placeholder=ui.input_placeholder,
                    label_visibility="collapsed",
                )

            with button_col:
                st.form_submit_button(ui.send_label, on_click=on_send, use_container_width=True)

        st.file_uploader(
            "Image",
            type=ui.accepted_file_types,
            key=composer.widget_key("image"),
            label_visibility="collapsed",
            on_change=self.sync_image,
            args=(composer,),
        )

    def sync_draft(self, composer: Composer):
        """Copy the text input value into the composer"""
        composer.set_draft_text(st.session_state.get(composer.widget_key("draft"), ""))

    def sync_image(self, composer: Composer):
        """Stage the uploaded file, or drop the staged image when it was removed"""
        uploaded = st.session_state.get(composer.widget_key("image"))
        if uploaded is None:
            composer.unstage_image()
            return
        composer.stage_image(uploaded.getvalue(), getattr(uploaded, "type", None))

    def render_preview(self, composer: Composer):
        """Live preview of the staged image beneath the composer"""
        if composer.staged_image is None:
            return
        st.markdown('<div class="composer-preview-title">Preview:</div>', unsafe_allow_html=True)
        self.render_image(composer.staged_image, caption="preview")


# Global interface instance
_chat_interface: Optional[ChatInterface] = None


def get_chat_interface() -> ChatInterface:
    """Get the global chat interface instance"""
    global _chat_interface
    if _chat_interface is None:
        _chat_interface = ChatInterface()
    return _chat_interface
