"""Safe error message formatting for CLI output.

Ensures exceptions always render with a useful message, even when their
str() is empty, and that paths containing brackets are not eaten by Rich
markup.
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

from .errors import VCSProbeFailedError

# Friendly messages for exception types known to have an empty str()
FRIENDLY_MESSAGES: dict[type, str] = {
    TimeoutError: "Operation timed out.",
    KeyboardInterrupt: "Operation interrupted by user.",
    PermissionError: "Permission denied.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a useful display message.

    Examples:
        >>> format_error_message(TimeoutError())
        'TimeoutError: Operation timed out.'

        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if isinstance(e, VCSProbeFailedError) and e.stderr and e.stderr.strip() not in error_str:
            error_str = f"{error_str}\n{e.stderr.strip()}"
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
        if isinstance(e, exc_type):
            return f"{error_type}: {friendly_msg}"

    return f"{error_type}: (no additional details)"


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings."""
    return _escape_markup(str(value))
