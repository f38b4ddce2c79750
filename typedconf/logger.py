import logging
import re
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def drop_color_message_key(_, __, event_dict: EventDict) -> EventDict:
    """
    Some servers log the message a second time in the extra `color_message`, but we don't
    need it. This processor drops the key from the event dict if it exists.
    """
    event_dict.pop("color_message", None)
    return event_dict


def setup_logging(json_logs: bool = False, log_level: str = "INFO"):
    """Configure structlog for the typedconf package"""

    # Leave an application's own structlog setup alone
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if (isinstance(handler, logging.StreamHandler) and
            isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)):
            return

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        drop_color_message_key,
        timestamper,
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        # Format the exception only for JSON logs, as we want to pretty-print them when
        # using the ConsoleRenderer
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    log_renderer: structlog.types.Processor
    if json_logs:
        log_renderer = structlog.processors.JSONRenderer()
    else:
        log_renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        # These run ONLY on `logging` entries that do NOT originate within
        # structlog.
        foreign_pre_chain=shared_processors,
        # These run on ALL entries after the pre_chain is done.
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            log_renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())


class TypedConfStructLogger:
    """
    Structured logger for the typedconf package.

    Values bound with `bind` stay attached to this logger instance only, so
    a builder and the registry can each carry their own context.
    """

    def __init__(self, log_name: str = "typedconf", logger=None):
        self.logger = logger if logger is not None else structlog.stdlib.get_logger(log_name)

    @staticmethod
    def _to_snake_case(name):
        """Convert CamelCase to snake_case"""
        return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()

    def bind(self, *args, **new_values: Any) -> "TypedConfStructLogger":
        """
        Return a logger with extra context bound.

        Args:
            *args: Types or objects; bound under their snake_cased class name
            **new_values: Key-value pairs to bind to the context
        """
        for arg in args:
            target = arg if isinstance(arg, type) else type(arg)
            new_values.setdefault(self._to_snake_case(target.__name__), target.__qualname__)
        return TypedConfStructLogger(logger=self.logger.bind(**new_values))

    def debug(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.debug(event, *args, **kw)

    def info(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.info(event, *args, **kw)

    def warning(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.warning(event, *args, **kw)

    warn = warning

    def error(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.error(event, *args, **kw)

    def exception(self, event: str | None = None, *args: Any, **kw: Any):
        self.logger.exception(event, *args, **kw)


_logger: TypedConfStructLogger | None = None


def get_typedconf_logger() -> TypedConfStructLogger:
    """Return the shared package logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = TypedConfStructLogger("typedconf")
    return _logger


def init_logger(config):
    """
    Initialize the structured logger for the typedconf package.

    Args:
        config: Configuration object with LOG_LEVEL and LOG_JSON settings

    Returns:
        TypedConfStructLogger: Configured structured logger instance
    """
    setup_logging(json_logs=config.LOG_JSON, log_level=config.LOG_LEVEL)
    return get_typedconf_logger()
