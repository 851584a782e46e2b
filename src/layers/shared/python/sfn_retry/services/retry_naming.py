"""Retry naming and date matching rules."""


RETRY_SUFFIX = "-r"
NAME_SEPARATOR = "_"


def derive_retry_name(original_name: str) -> str:
    """Derive the name of a retry execution.

    Keeps the part of the name before the first underscore (the whole name
    when there is none) and appends ``-r``. Two originals sharing that
    prefix derive the same name; the second start is then rejected by
    Step Functions as a duplicate.

    Args:
        original_name: Name of the failed execution.

    Returns:
        Name for the retry execution.
    """
    prefix = original_name.split(NAME_SEPARATOR, 1)[0]
    return f"{prefix}{RETRY_SUFFIX}"


def stop_date_matches(stop_date: str | None, date: str) -> bool:
    """Check whether an execution stopped on ``date``.

    Lexical prefix test of the rendered ISO-8601 stop timestamp against
    ``YYYY-MM-DD``. The timestamp's own offset is used as-is, so a stop
    just after midnight in one offset can fall on the previous day in
    another. Executions without a stop date never match.
    """
    if not stop_date:
        return False
    return stop_date.startswith(date)
