""" Miscellaneous helpers. """
from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO, rich_tracebacks: bool = True) -> None:
    """ Configure the root logger to use rich.

    The library itself only ever creates module level loggers, so this should be called
    once by whatever script is driving the analysis.

    Args:
        level: Logging level, either as a logging constant or a name (eg. "DEBUG").
        rich_tracebacks: Whether rich should render tracebacks.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(), rich_tracebacks=rich_tracebacks)],
    )
