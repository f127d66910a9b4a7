"""
AI service - handles captioning requests and reply resolution.
"""

from .captioning_client import CaptioningClient
from .exceptions import CaptioningError, CaptioningConnectionError, CaptioningResponseError
from .models import CaptionRequest, CaptionResponse
from .reply_resolver import resolve_reply_text

__all__ = [
    'CaptioningClient',
    'CaptioningError',
    'CaptioningConnectionError',
    'CaptioningResponseError',
    'CaptionRequest',
    'CaptionResponse',
    'resolve_reply_text'
]
