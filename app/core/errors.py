"""Error taxonomy for photo provider calls and the sentinel error wire format.

Provider failures are classified into transport, timeout, status, malformed
and application errors. The orchestrator folds all of them into a single
``PhotoSearchError`` which the HTTP layer renders as a plain-text body wrapped
between the ``Start`` and ``End`` markers the browser client looks for.
"""

from typing import Optional

SENTINEL_START = "Start"
SENTINEL_END = "End"


class PhotoProviderError(Exception):
    kind = "provider"


class ProviderTransportError(PhotoProviderError):
    """DNS, connect or read failure talking to the provider."""
    kind = "transport"


class ProviderTimeoutError(ProviderTransportError):
    kind = "timeout"


class ProviderStatusError(PhotoProviderError):
    kind = "status"

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"Provider responded with HTTP {status_code}")


class MalformedPayloadError(PhotoProviderError):
    kind = "malformed"


class ProviderApplicationError(PhotoProviderError):
    """The provider answered, but reported a failure (bad key, bad params, rate limit)."""
    kind = "application"

    def __init__(self, code: Optional[int], message: str):
        self.code = code
        self.message = message
        super().__init__(message)


STATUS_BY_KIND = {
    "transport": 502,
    "timeout": 504,
    "status": 502,
    "malformed": 502,
    "application": 502,
}


class PhotoSearchError(Exception):
    """Single error surfaced by the search orchestrator."""

    def __init__(self, message: str, kind: str = "internal"):
        self.message = message
        self.kind = kind
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND.get(self.kind, 500)


def wrap_error_message(text: str) -> str:
    message = f"{SENTINEL_START}\n Oops! \n {text} \n{SENTINEL_END}"
    return message.replace("\r\n", "\n").replace("\n", "<br>")


def unwrap_error_message(body: str) -> str:
    """Return the text between the first ``Start`` and the following ``End``.

    Bodies without a ``Start`` marker (framework validation errors, proxies)
    are returned whole so the caller always has something to display.
    """
    start = body.find(SENTINEL_START)
    if start == -1:
        return body
    start += len(SENTINEL_START)
    end = body.find(SENTINEL_END, start)
    if end == -1:
        return body[start:]
    return body[start:end]
