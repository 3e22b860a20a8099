"""Output formatting helpers for bootcheck CLI messages."""

from __future__ import annotations

__all__ = ["format_error"]


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Args:
        message: Primary error message.
        details: Optional list of detail lines to include.
        suggestion: Optional suggestion for resolving the error.

    Returns:
        Formatted error string.

    Example:
        >>> print(format_error(
        ...     "Invalid configuration: Field required",
        ...     details=["Field: checks.0.name"],
        ...     suggestion="Check bootcheck.yaml",
        ... ))
        Error: Invalid configuration: Field required
          Field: checks.0.name
        Suggestion: Check bootcheck.yaml
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)
