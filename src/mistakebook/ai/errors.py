from __future__ import annotations

from typing import Iterable, NoReturn


class LLMError(RuntimeError):
    code = "AI_ERROR"


class LLMValidationError(LLMError):
    """Raised when the model output cannot be turned into a structured record."""

    code = "AI_VALIDATION_ERROR"


class MissingFieldsError(LLMValidationError):
    """Raised when required tags are absent from the model reply."""

    code = "AI_MISSING_FIELDS"

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        tags = ", ".join(f"<{name}>" for name in self.missing)
        super().__init__(f"Invalid AI response: missing required tags {tags}")


class LLMAuthError(LLMError):
    code = "AI_AUTH_ERROR"


class LLMConnectionError(LLMError):
    code = "AI_CONNECTION_FAILED"


class LLMResponseError(LLMError):
    code = "AI_RESPONSE_ERROR"


class LLMUnknownError(LLMError):
    code = "AI_UNKNOWN_ERROR"


_CONNECTION_HINTS = ("fetch failed", "network", "connect")
_RESPONSE_HINTS = ("invalid json", "parse")
_AUTH_HINTS = ("api key", "unauthorized", "401")


def classify_error(error: BaseException) -> LLMError:
    """Map a backend failure onto the LLMError taxonomy.

    Errors that are already LLMError instances are returned unchanged. Anything
    else is classified by substrings of its lower-cased message; the checks run
    in a fixed order (connection, response, auth) and the first hit wins.
    """

    if isinstance(error, LLMError):
        return error

    message = str(error)
    msg = message.lower()

    if any(hint in msg for hint in _CONNECTION_HINTS):
        return LLMConnectionError(message)
    if any(hint in msg for hint in _RESPONSE_HINTS):
        return LLMResponseError(message)
    if any(hint in msg for hint in _AUTH_HINTS):
        return LLMAuthError(message)
    return LLMUnknownError(message)


def raise_classified(error: BaseException) -> NoReturn:
    """Re-raise ``error`` as its classified LLMError, chained to the original.

    Call from inside an ``except`` block.
    """

    classified = classify_error(error)
    if classified is error:
        raise error
    raise classified from error
