import streamlit as st

from config.app_config import get_config, get_hf_api_key
from services.ai_service.exceptions import CaptioningConnectionError, CaptioningError, CaptioningResponseError
from services.chat_service.send_workflow import SendWorkflow, create_send_workflow
from services.ui_service.chat_interface import get_chat_interface
from utils.logging_config import initialize_logging, get_logger

# Initialize logging and error tracking
error_tracker = initialize_logging()
logger = get_logger(__name__)

# Get configuration
config = get_config()

st.set_page_config(page_title=config.ui.app_title, page_icon=config.ui.page_icon, layout="centered")

SESSION_STARTED_KEY = "session_started"


def handle_send(workflow: SendWorkflow):
    """Send button and Enter callback: commit the draft, append the user message, clear the composer"""
    get_chat_interface().sync_draft(workflow.composer)
    if not workflow.queue():
        logger.debug("Send ignored, composer empty")


def settle_pending_sends(workflow: SendWorkflow):
    """Fetch replies for sends begun in the previous run and draw them as they land"""
    interface = get_chat_interface()

    while workflow.store.next_pending_send() is not None:
        try:
            with st.spinner("Waiting for a reply..."):
                reply = workflow.complete_next()
            interface.render_message(reply)

        except CaptioningConnectionError as e:
            error_tracker.track_error(e, "caption_request_connection")
            st.error("🌐 **Connection problem** - The captioning service could not be reached. Your message was kept, please try again.")

        except CaptioningResponseError as e:
            error_tracker.track_error(e, "caption_response_parse", status_code=e.status_code)
            st.error("❌ **Unreadable response** - The captioning service answered with something that is not JSON.")

        except CaptioningError as e:
            error_tracker.track_error(e, "caption_request")
            st.error("🔧 **Unexpected error** - The image could not be captioned.")


def main_app():
    """Main application content"""
    interface = get_chat_interface()
    interface.inject_styles()

    st.title(f"{config.ui.page_icon} {config.ui.app_title}")
    if not st.session_state.get(SESSION_STARTED_KEY):
        st.session_state[SESSION_STARTED_KEY] = True
        logger.info("Session started", extra=config.captioning.to_dict())

    if not get_hf_api_key():
        st.warning("🔑 No Hugging Face API token configured (HF_API_KEY). Image requests will be rejected.")

    workflow = create_send_workflow(config)

    # Scrollable message list
    with st.container(height=config.ui.message_list_height, border=True):
        if len(workflow.store) == 0:
            interface.render_empty_state()
        interface.render_chat_messages(workflow.store.messages)
        settle_pending_sends(workflow)

    interface.render_composer(workflow.composer, on_send=lambda: handle_send(workflow))
    interface.render_preview(workflow.composer)


main_app()
