"""
Errors raised while talking to the captioning endpoint.
"""

from typing import Optional


class CaptioningError(Exception):
    """Base class for captioning failures that leave a send without a reply"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CaptioningConnectionError(CaptioningError):
    """The request never produced an HTTP response"""


class CaptioningResponseError(CaptioningError):
    """The endpoint answered with a body that is not JSON"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message, status_code)
        self.body = body
