from __future__ import annotations


class BootcheckError(Exception):
    """Base exception class for all bootcheck-specific errors.

    This is the root of the bootcheck exception hierarchy. Catching it at
    the CLI boundary handles every error the tool raises on purpose while
    letting system exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            config = load_config(path)
        except BootcheckError as e:
            click.echo(f"Error: {e.message}", err=True)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the BootcheckError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
