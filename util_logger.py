# ============================================================================
# MODULE CONTEXT - LOGGING
# ============================================================================
# STATUS: Shared - used by every stac_client component
# PURPOSE: JSON-only structured logging for the STAC client
# EXPORTS: ComponentType, LogLevel, LogContext, ComponentConfig, JSONFormatter, ContextLoggerAdapter, LoggerFactory, log_exceptions
# INTERFACES: Dataclass models, enums, factory, JSON formatter, exception decorator
# DEPENDENCIES: enum, dataclasses, typing, datetime, logging, json, traceback (stdlib only!)
# SOURCE: Client layers define component types
# PATTERNS: JSON-only output, Exception decorator pattern
# ENTRY_POINTS: LoggerFactory.create_logger(), @log_exceptions decorator
# ============================================================================

"""
Unified Logger System

Component-specific loggers that emit one JSON object per line, with
correlation context (landing page, search mode) attached as
custom dimensions so log aggregators can filter on them.

Design Principles:
- Strong typing with dataclasses (stdlib only)
- Enum safety for categories
- Component-specific loggers
- Clean factory pattern
- No external dependencies

Environment:
    STAC_CLIENT_DEBUG_LOGGING=true switches the default level to DEBUG.

Date: 18 OCT 2026
"""

from enum import Enum
from typing import Optional, Dict, Any, Tuple, Type
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import os
import sys
import json
import traceback
from functools import wraps


# ============================================================================
# COMPONENT TYPES - Aligned with client layers
# ============================================================================

class ComponentType(Enum):
    """
    Component types aligned with the client layers.

    NO "UTIL" or other non-architectural types.
    """
    CLIENT = "client"        # Orchestration layer (STACClient)
    TRANSPORT = "transport"  # HTTP capability layer
    BUILDER = "builder"      # Request construction layer


# ============================================================================
# LOG LEVELS - Standard Python levels with enum safety
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Create from string, case-insensitive."""
        return cls[level.upper()]


# ============================================================================
# LOG CONTEXT - Correlation and tracking
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """
    Context for log correlation across client operations.
    """
    landing_page_url: Optional[str] = None  # STAC API root
    search_mode: Optional[str] = None  # GET, POST or AUTO

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            k: v for k, v in {
                'landing_page_url': self.landing_page_url,
                'search_mode': self.search_mode
            }.items() if v is not None
        }


# ============================================================================
# COMPONENT CONFIGURATION - Per-component settings
# ============================================================================

@dataclass
class ComponentConfig:
    """
    Configuration for component-specific logging.

    Each component type can have different settings.
    """
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO
    max_message_length: int = 1000


def _default_level() -> LogLevel:
    """DEBUG when STAC_CLIENT_DEBUG_LOGGING=true, INFO otherwise."""
    if os.getenv('STAC_CLIENT_DEBUG_LOGGING', '').lower() == 'true':
        return LogLevel.DEBUG
    return LogLevel.INFO


# ============================================================================
# JSON FORMATTER - Structured logging
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    """

    def __init__(self, max_message_length: Optional[int] = None):
        super().__init__()
        self.max_message_length = max_message_length

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python LogRecord to format

        Returns:
            JSON string with structured log data
        """
        message = record.getMessage()
        if self.max_message_length and len(message) > self.max_message_length:
            message = message[:self.max_message_length] + '...'

        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': message,
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# CONTEXT ADAPTER - Per-instance context on a shared logger
# ============================================================================

class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Attach a LogContext to every record without modifying the logger.

    Component loggers are process-wide (one per name), so per-instance
    context such as the landing page of one client travels with the
    adapter instead.

    Example:
        log = LoggerFactory.with_context(logger, LogContext(search_mode="POST"))
        log.info("Searching items")
    """

    def __init__(self, logger: logging.Logger, context: LogContext):
        super().__init__(logger, {})
        self.context = context

    def process(self, msg, kwargs):
        extra = dict(kwargs.get('extra') or {})
        custom_dims = self.context.to_dict()
        custom_dims.update(extra.get('custom_dimensions', {}))
        extra['custom_dimensions'] = custom_dims
        kwargs['extra'] = extra
        return msg, kwargs


# ============================================================================
# LOGGER FACTORY - Creates component-specific loggers
# ============================================================================

class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    Example:
        logger = LoggerFactory.create_logger(
            ComponentType.CLIENT,
            "STACClient",
            context=LogContext(landing_page_url="https://host/stac")
        )
        logger.info("Landing page loaded")
    """

    @classmethod
    def default_config(cls, component_type: ComponentType) -> ComponentConfig:
        """Default configuration for a component type."""
        return ComponentConfig(component_type=component_type, log_level=_default_level())

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        config: Optional[ComponentConfig] = None
    ) -> logging.Logger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "STACClient")
            context: Optional log context for correlation
            config: Optional custom configuration

        Returns:
            Configured Python logger
        """
        if config is None:
            config = cls.default_config(component_type)

        logger_name = f"stac_client.{component_type.value}.{name}"
        logger = logging.getLogger(logger_name)

        if isinstance(config.log_level, str):
            log_level = LogLevel.from_string(config.log_level).to_python_level()
        else:
            log_level = config.log_level.to_python_level()
        logger.setLevel(log_level)

        # Remove existing handlers to avoid duplicates
        logger.handlers.clear()

        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(JSONFormatter(max_message_length=config.max_message_length))
        logger.addHandler(handler)

        logger.propagate = True

        # Inject context as custom dimensions on every record; wrap the
        # unwrapped _log so repeated calls replace the context instead of nesting
        original_log = logger.__dict__.get('_unwrapped_log', logger._log)
        logger._unwrapped_log = original_log

        def log_with_context(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
            """Wrapper to inject context as custom dimensions."""
            if extra is None:
                extra = {}

            custom_dims = context.to_dict() if context else {}
            custom_dims['component_type'] = component_type.value
            custom_dims['component_name'] = name

            if 'custom_dimensions' in extra:
                custom_dims.update(extra['custom_dimensions'])

            extra['custom_dimensions'] = custom_dims

            original_log(level, msg, args, exc_info=exc_info, extra=extra,
                         stack_info=stack_info, stacklevel=stacklevel)

        logger._log = log_with_context

        return logger

    @classmethod
    def with_context(cls, logger: logging.Logger, context: LogContext) -> ContextLoggerAdapter:
        """Wrap a component logger with per-instance context."""
        return ContextLoggerAdapter(logger, context)

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        """
        Set the level of every stac_client component logger created so far.

        Levels are process-wide, like the loggers themselves.
        """
        python_level = level.to_python_level()
        for name, logger in list(logging.root.manager.loggerDict.items()):
            if not name.startswith('stac_client.') or not isinstance(logger, logging.Logger):
                continue
            logger.setLevel(python_level)
            for handler in logger.handlers:
                handler.setLevel(python_level)


# ============================================================================
# EXCEPTION DECORATOR - Automatic exception logging with context
# ============================================================================

def log_exceptions(component_type: Optional[ComponentType] = None,
                   component_name: Optional[str] = None,
                   logger: Optional[logging.Logger] = None,
                   expected: Tuple[Type[BaseException], ...] = ()):
    """
    Decorator to log exceptions with full context, then re-raise them.

    Can be used in three ways:
    1. With existing logger: @log_exceptions(logger=my_logger)
    2. With component info: @log_exceptions(ComponentType.CLIENT, "STACClient")
    3. Simple: @log_exceptions() - uses function module and name

    Args:
        component_type: Optional component type for creating logger
        component_name: Optional component name for creating logger
        logger: Optional existing logger to use
        expected: Exception types the caller is meant to handle. These are
            logged at WARNING without a traceback, anything else at ERROR.

    Returns:
        Decorator function that wraps the target function

    Example:
        @log_exceptions(ComponentType.CLIENT, "STACClient")
        def search(self, query, mode):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if logger:
                    log = logger
                elif component_type and component_name:
                    log = LoggerFactory.create_logger(component_type, component_name)
                else:
                    log = LoggerFactory.create_logger(
                        ComponentType.CLIENT,
                        func.__module__ or "unknown"
                    )

                dims = {
                    'function_name': func.__name__,
                    'function_module': func.__module__,
                    'exception_type': type(e).__name__,
                    'exception_message': str(e)
                }

                if isinstance(e, expected):
                    log.warning(
                        f"{func.__name__} failed: {e}",
                        extra={'custom_dimensions': dims}
                    )
                    raise

                dims.update({
                    'function_args': str(args)[:500],
                    'function_kwargs': str(kwargs)[:500],
                    'traceback': traceback.format_exc()
                })
                log.error(
                    f"Exception in {func.__name__}: {e}",
                    exc_info=True,
                    extra={'custom_dimensions': dims}
                )
                # Re-raise the exception - don't swallow it
                raise
        return wrapper
    return decorator
