"""structlog setup shared by the ``govtex`` and ``latex-diff`` commands.

Log events go to stderr so that stdout carries only the summaries the
commands print for the user.
"""
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

import structlog


def resolve_level(log_level: str) -> int:
    """Map ``DEBUG``/``info``/``10`` style names to a logging level, defaulting to INFO."""
    name = str(log_level).strip()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def build_processors(json_logs: bool = False) -> List[Any]:
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def _stderr_logger_factory(*args):
    # Look up sys.stderr per logger so redirected streams are honored
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    level = resolve_level(log_level)
    structlog.configure(
        processors=build_processors(json_logs),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )

    # Stray stdlib records (third-party libraries, warnings) also go to stderr
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=level,
    )
    logging.captureWarnings(True)


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Attach ``values`` to every event logged inside the block."""
    bound = {key: str(value) for key, value in values.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def get_logger(name: Optional[str] = None):
    return structlog.get_logger(name)
