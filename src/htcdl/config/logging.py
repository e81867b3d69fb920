"""structlog setup for htcdl.

stdout carries results only; every log line goes to stderr, either as
console text or as JSON lines (``--log-json``). Stdlib loggers
(``logging.getLogger(__name__)``) and structlog loggers share one handler,
so both get the same fields.

While a service works on a model, :func:`model_log_context` binds
``model_id`` and ``op`` into structlog's context, and every line logged in
the meantime (engine, services, plugins) carries them.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from structlog.types import Processor

# Third-party loggers that never go below WARNING, even with --verbose.
QUIET_LIBRARIES = ("pluggy", "networkx")


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the single stderr handler. Safe to call repeatedly.

    ``htcdl.*`` logs at DEBUG when *verbose*, otherwise WARNING.
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("htcdl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def model_log_context(model_id: str, op: str) -> Iterator[None]:
    """Tag every log line emitted inside the block with *model_id* and *op*."""
    with structlog.contextvars.bound_contextvars(model_id=model_id, op=op):
        yield
