"""
Send workflow - validates, dispatches and settles one send from the composer.
"""

from typing import Any, MutableMapping, Optional

from config.app_config import AppConfig, CaptioningConfig
from services.ai_service.captioning_client import CaptioningClient
from services.ai_service.exceptions import CaptioningError
from services.ai_service.reply_resolver import resolve_reply_text
from services.chat_service.conversation_store import ConversationStore
from services.chat_service.models import Message, PendingSend
from services.ui_service.composer import Composer
from utils.image_encoding import strip_data_uri_prefix
from utils.logging_config import get_logger, log_user_interaction


class SendWorkflow:
    """
    Orchestrates a send in two phases so the page can re-render between them.

    ``begin`` appends the user message and clears the composer straight away;
    ``complete`` makes the network call, if any, and appends the reply.
    The captioning client, and with it the bearer token, is injected.
    """

    def __init__(
        self,
        store: ConversationStore,
        composer: Composer,
        client: CaptioningClient,
        captioning: Optional[CaptioningConfig] = None,
    ):
        self.logger = get_logger(__name__)
        self.store = store
        self.composer = composer
        self.client = client
        self.captioning = captioning or CaptioningConfig()

    def begin(self) -> Optional[PendingSend]:
        """
        Append the user message and clear the composer

        Returns:
            Snapshot needed to finish the send, or None when there is nothing to send
        """
        if not self.composer.has_content():
            return None

        draft_text = self.composer.draft_text
        staged_image = self.composer.staged_image

        self.store.append(Message.from_user(draft_text, image=staged_image))
        self.composer.clear()

        log_user_interaction(
            self.logger,
            "send",
            text_length=len(draft_text),
            has_image=staged_image is not None,
        )

        return PendingSend(
            prompt=draft_text,
            image_b64=strip_data_uri_prefix(staged_image) if staged_image is not None else None,
        )

    def complete(self, pending: PendingSend) -> Message:
        """
        Resolve the reply for a begun send and append it

        Raises:
            CaptioningError: the request failed or the body was not JSON;
                nothing is appended in that case
        """
        if not pending.has_image:
            return self.store.append(Message.from_assistant(self.captioning.text_only_reply))

        prompt = pending.prompt or self.captioning.default_prompt
        response = self.client.caption(prompt, pending.image_b64)

        reply_text = resolve_reply_text(response.data, self.captioning.no_response_reply)
        if not response.ok:
            self.logger.warning(
                f"Captioning endpoint answered HTTP {response.status_code}",
                extra={"status_code": response.status_code}
            )

        return self.store.append(Message.from_assistant(reply_text, is_error=not response.ok))

    def send(self) -> Optional[Message]:
        """Run both phases; returns the assistant reply or None for a no-op"""
        pending = self.begin()
        if pending is None:
            return None
        return self.complete(pending)

    def queue(self) -> bool:
        """
        Begin a send and leave its reply for the next page run

        Used from the send button callback, where nothing can be drawn yet.
        """
        pending = self.begin()
        if pending is None:
            return False
        self.store.add_pending_send(pending)
        return True

    def complete_next(self) -> Optional[Message]:
        """
        Settle the oldest queued send

        The send leaves the queue only once its reply is appended or its
        request has failed, so a page run stopped part way keeps the rest
        of the queue for the next run.

        Raises:
            CaptioningError: the send is dropped and nothing is appended
        """
        pending = self.store.next_pending_send()
        if pending is None:
            return None
        try:
            reply = self.complete(pending)
        except CaptioningError:
            self.store.drop_pending_send()
            raise
        self.store.drop_pending_send()
        return reply


def create_send_workflow(config: AppConfig, state: Optional[MutableMapping[str, Any]] = None) -> SendWorkflow:
    """Wire a send workflow for the current session from configuration"""
    client = CaptioningClient(
        api_token=config.api.hf_api_key,
        endpoint_url=config.captioning.endpoint_url,
        timeout=config.captioning.timeout_seconds,
    )
    return SendWorkflow(
        store=ConversationStore(state),
        composer=Composer(state),
        client=client,
        captioning=config.captioning,
    )
