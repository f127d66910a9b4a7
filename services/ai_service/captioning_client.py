"""
Captioning client - sends an image and prompt to the hosted captioning model.
"""

from typing import Optional

import requests

from services.ai_service.exceptions import CaptioningConnectionError, CaptioningResponseError
from services.ai_service.models import CaptionRequest, CaptionResponse
from utils.logging_config import get_logger, log_execution_time


class CaptioningClient:
    """
    Client for the image captioning inference endpoint.

    One POST per call, no retries. The status code is recorded on the
    response rather than raised, callers decide what a non-2xx reply means.
    """

    def __init__(
        self,
        api_token: str,
        endpoint_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.logger = get_logger(__name__)
        self.api_token = api_token
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def build_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    def build_payload(self, prompt: str, image_b64: str) -> dict:
        return CaptionRequest.build(prompt, image_b64).to_payload()

    def caption(self, prompt: str, image_b64: str) -> CaptionResponse:
        """
        Request a caption for a base64 image

        Args:
            prompt: Instruction sent alongside the image
            image_b64: Base64 payload without the data-URI prefix

        Returns:
            CaptionResponse with the parsed JSON body

        Raises:
            CaptioningConnectionError: the request failed before a response arrived
            CaptioningResponseError: the body could not be parsed as JSON
        """
        payload = self.build_payload(prompt, image_b64)

        with log_execution_time(self.logger, "caption_request", prompt_length=len(prompt)):
            try:
                resp = self.session.post(
                    self.endpoint_url,
                    json=payload,
                    headers=self.build_headers(),
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise CaptioningConnectionError(f"Captioning request failed: {e}") from e

        raw_text = resp.text or ""
        data = None
        if raw_text.strip():
            try:
                data = resp.json()
            except ValueError as e:
                raise CaptioningResponseError(
                    f"Captioning endpoint returned non-JSON body (HTTP {resp.status_code})",
                    status_code=resp.status_code,
                    body=raw_text,
                ) from e

        self.logger.debug("Captioning API response", extra={
            "status_code": resp.status_code,
            "response_body": data,
        })

        return CaptionResponse(
            status_code=resp.status_code,
            data=data,
            raw_text=raw_text,
        )
