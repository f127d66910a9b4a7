"""
Tests for the page script, run through Streamlit's app test harness
"""

from pathlib import Path
from unittest.mock import patch

from streamlit.testing.v1 import AppTest

from services.ai_service.captioning_client import CaptioningClient
from services.ai_service.exceptions import CaptioningConnectionError
from services.ai_service.models import CaptionResponse
from services.chat_service.conversation_store import CONVERSATION_KEY
from services.ui_service.chat_interface import escape_markdown
from services.ui_service.composer import COMPOSER_KEY, ComposerState

APP_PATH = str(Path(__file__).resolve().parent.parent / "caption_chat_app.py")
TEXT_ONLY_REPLY = "Text-only input detected. Try uploading an image!"


class TestCaptionChatApp:
    """Test sends through the rendered page"""

    def setup_method(self):
        """Start a fresh page session with the captioning call mocked"""
        self.caption_patcher = patch.object(
            CaptioningClient, "caption",
            return_value=CaptionResponse(status_code=200, data={"generated_text": "a cat"}),
        )
        self.caption = self.caption_patcher.start()
        self.at = AppTest.from_file(APP_PATH, default_timeout=30)
        self.at.run()

    def teardown_method(self):
        """Clean up test environment"""
        self.caption_patcher.stop()

    def stage_image(self, data_uri):
        self.at.session_state[COMPOSER_KEY] = ComposerState(staged_image=data_uri)
        self.at.run()

    def send(self, text=""):
        if text:
            self.at.text_input[0].input(text)
        self.at.button[0].click().run()

    def test_empty_page(self):
        assert not self.at.exception
        assert len(self.at.chat_message) == 0
        assert self.at.text_input[0].placeholder == "Type a message"

    def test_text_send_shows_message_and_reply(self):
        self.send("hello")

        assert not self.at.exception
        assert len(self.at.chat_message) == 2
        assert self.at.chat_message[0].markdown[0].value == "**user:** hello"
        assert self.at.chat_message[1].markdown[0].value == f"**assistant:** {escape_markdown(TEXT_ONLY_REPLY)}"
        self.caption.assert_not_called()

    def test_composer_cleared_after_send(self):
        self.send("hello")

        assert self.at.text_input[0].value == ""
        assert self.at.session_state[COMPOSER_KEY].generation == 1

    def test_empty_send_is_noop(self):
        self.send()

        assert len(self.at.chat_message) == 0
        assert self.at.session_state[CONVERSATION_KEY] == ()

    def test_image_send_uses_default_prompt(self, png_data_uri):
        self.stage_image(png_data_uri)

        self.send()

        assert len(self.at.chat_message) == 2
        assert self.at.chat_message[1].markdown[0].value == "**assistant:** a cat"
        self.caption.assert_called_once_with("Describe this image", png_data_uri.partition(",")[2])

    def test_connection_error_leaves_message_unanswered(self, png_data_uri):
        self.caption.side_effect = CaptioningConnectionError("Captioning request failed: down")
        self.stage_image(png_data_uri)

        self.send("what is this?")

        assert len(self.at.chat_message) == 1
        assert len(self.at.error) == 1
        assert "Connection problem" in self.at.error[0].value
        assert [m.content for m in self.at.session_state[CONVERSATION_KEY]] == ["what is this?"]

    def test_enter_submits_composer_form(self):
        """Test the text input belongs to the send form, so Enter submits it"""
        text_input = self.at.text_input[0]
        send_button = self.at.button[0]

        assert text_input.form_id
        assert text_input.form_id == send_button.form_id

        text_input.input("hello")
        send_button.click().run()

        assert [m.content for m in self.at.session_state[CONVERSATION_KEY]] == ["hello", TEXT_ONLY_REPLY]

    def test_session_start_logged_once(self):
        with patch("utils.logging_config.get_logger") as get_logger:
            at = AppTest.from_file(APP_PATH, default_timeout=30)
            at.run()
            at.run()

        started = [c for c in get_logger.return_value.info.call_args_list if c.args and c.args[0] == "Session started"]
        assert len(started) == 1

