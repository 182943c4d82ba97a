"""Bot utility functions for error reporting."""


def describe_error(error: BaseException) -> str:
    """Render an exception together with the chain of its causes.

    Args:
        error: Exception to describe.

    Returns:
        The exception message followed by one ``Caused by:`` line per
        chained exception.
    """
    lines = [str(error) or type(error).__name__]

    seen = {id(error)}
    cause = error.__cause__ or error.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        lines.append(f"Caused by: {str(cause) or type(cause).__name__}")
        cause = cause.__cause__ or cause.__context__

    return "\n".join(lines)


def panic_message(error: BaseException) -> str | None:
    """Extract a readable message from a crashed handler's exception."""
    if error.args and isinstance(error.args[0], str):
        return error.args[0]
    return None
