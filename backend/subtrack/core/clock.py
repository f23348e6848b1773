"""Clock collaborator: the single place where the wall clock is read."""

from datetime import date


def get_today() -> date:
    """Return the current local calendar date.

    Used as a FastAPI dependency and by worker tasks so every computation
    downstream receives "today" as an explicit argument.
    """
    return date.today()
