"""
Error taxonomy shared by the extraction and analysis pipelines.

ValidationError is a caller-input problem (HTTP 400). UpstreamError covers
the completion service being unreachable, rate limited, or returning
something unusable. `message` is what the end user sees; `details` holds the
raw cause for logs.
"""
from typing import Optional

UPSTREAM_FAILED_MESSAGE = "AI 요청 처리에 실패했습니다. 잠시 후 다시 시도해주세요."
RATE_LIMITED_MESSAGE = "요청 한도를 초과했습니다. 잠시 후 다시 시도해주세요."
ANALYSIS_FAILED_MESSAGE = "AI 분석 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."


class TodoAppError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(TodoAppError):
    status_code = 400

    def __init__(self, reason: str, message: str, details: Optional[str] = None):
        super().__init__(message, details)
        self.reason = reason


class UpstreamError(TodoAppError):
    status_code = 500

    def __init__(
        self,
        message: str = UPSTREAM_FAILED_MESSAGE,
        details: Optional[str] = None,
    ):
        super().__init__(message, details)


class RateLimitedError(UpstreamError):
    status_code = 429

    def __init__(self, details: Optional[str] = None):
        super().__init__(RATE_LIMITED_MESSAGE, details)


class NotConfiguredError(UpstreamError):
    def __init__(self):
        super().__init__("AI 기능이 설정되지 않았습니다. 관리자에게 문의해주세요.", "API key not configured")
