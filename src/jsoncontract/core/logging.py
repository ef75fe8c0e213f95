"""Structured logging setup for the jsoncontract CLI and embedding hosts.

Modules log through ``structlog.get_logger(__name__)`` and never configure
anything on import. configure_logging() points structlog at stdlib logging
and installs one stderr handler whose ProcessorFormatter renders both
structlog events and plain ``logging`` records, so resolver events and the
host application's own records come out in one format.

Values bound with ``structlog.contextvars`` (the CLI binds ``target``) are
merged into every event.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

# Third-party loggers held at WARNING even when the resolver runs at DEBUG.
_NOISY_LOGGERS: tuple[str, ...] = (
    "pluggy",
    "numpy",
    "pandas",
    "dynaconf",
)


def _drop_formatter_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Strip the _record/_from_structlog keys ProcessorFormatter adds."""
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _pre_chain() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


def _renderers(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    return [
        _drop_formatter_fields,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def configure_logging(*, json_output: bool = False, level: str = "WARNING") -> None:
    """Route structlog and stdlib logging to stderr.

    stdout stays free for ``describe --json`` output.

    Args:
        json_output: Render one JSON object per line instead of console text
        level: Root level name; contract build events are logged at DEBUG
    """
    log_level = logging.getLevelNamesMapping()[level.upper()]
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration in tests needs fresh loggers
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ProcessorFormatter(processors=_renderers(json_output), foreign_pre_chain=pre_chain))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    noisy_level = max(log_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)
