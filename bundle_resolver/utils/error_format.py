"""Error message formatting for CLI output."""

from __future__ import annotations

from rich.markup import escape as _escape_markup


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a non-empty display message.

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'

        >>> format_error_message(RuntimeError())
        'RuntimeError: (no additional details)'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if not error_str:
        return f"{error_type}: (no additional details)"
    if include_type and error_type not in error_str:
        return f"{error_type}: {error_str}"
    return error_str


def escape_markup(value: object) -> str:
    """Escape Rich markup so error text containing [brackets] prints literally."""
    return _escape_markup(str(value))
