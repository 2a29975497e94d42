"""
LearnLink - Centralized Logging Configuration
Plain text logs by default, JSON structured logs when json_logs is set.

Logs go to a rotating file in the config directory. The console only gets
log lines in verbose mode so they never interleave with rendered screens.
"""

import logging
import sys
import json
from datetime import datetime, timezone
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from learnlink.config import LearnLinkConfig


# Context variables for tracing what the user was doing
route_var: ContextVar[str] = ContextVar('route', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')


def get_route() -> str:
    """Get current route from context"""
    return route_var.get() or ''


def set_route(route: str) -> None:
    """Set current route in context"""
    route_var.set(route)


def get_user_id() -> str:
    """Get current user ID from context"""
    return user_id_var.get() or ''


def set_user_id(user_id: str) -> None:
    """Set user ID in context"""
    user_id_var.set(user_id)


_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'taskName', 'route', 'user_id',
}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging
    One object per line, easy to grep or ship to a log aggregator
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        route = get_route()
        if route:
            log_data["route"] = route

        user_id = get_user_id()
        if user_id:
            log_data["user_id"] = user_id

        if record.exc_info:
            log_data["error_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            log_data["exception"] = self.formatException(record.exc_info)

        # Anything passed through extra=
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ContextualFormatter(logging.Formatter):
    """
    Readable formatter that includes the current route and user id
    """

    def format(self, record: logging.LogRecord) -> str:
        record.route = get_route() or '-'
        record.user_id = get_user_id() or '-'

        return super().format(record)


class LearnLinkLogger(logging.Logger):
    """Logger with structured helpers for the client's own events"""

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        """Log an outgoing API request; status 0 means it never got an answer"""
        if status_code == 0:
            level, outcome = logging.WARNING, "no response"
        else:
            level = logging.WARNING if status_code >= 400 else logging.DEBUG
            outcome = str(status_code)
        self.log(
            level,
            f"{method} {path} -> {outcome} in {duration_ms:.0f}ms",
            extra={
                "event_type": "api_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": round(duration_ms, 2),
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, role: Optional[str] = None, **kwargs) -> None:
        """Log logins, logouts and password resets. Never pass the password or token."""
        parts = [f"{event} {'ok' if success else 'failed'}"]
        if user_email:
            parts.append(f"for {user_email}")
        if role:
            parts.append(f"as {role}")
        if reason:
            parts.append(f"({reason})")
        self.log(
            logging.INFO if success else logging.WARNING,
            " ".join(parts),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "user_role": role,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **kwargs) -> None:
        """Log an error that aborted a command, with the page it happened on"""
        where = context or get_route() or "learnlink"
        message = getattr(error, "message", None) or str(error)
        self.error(
            f"{where}: {type(error).__name__}: {message}",
            exc_info=error,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_code": getattr(error, "code", None),
                "error_context": where,
                **kwargs
            }
        )


# Registered before any learnlink module asks for its logger
logging.setLoggerClass(LearnLinkLogger)


def get_logger(name: str) -> LearnLinkLogger:
    """Return a LearnLinkLogger even if the logger existed before registration"""
    logger = logging.getLogger(name)
    if not isinstance(logger, LearnLinkLogger):
        logger.__class__ = LearnLinkLogger
    return logger


def setup_logging(config: LearnLinkConfig) -> LearnLinkLogger:
    """Setup logging for the learnlink package based on config"""

    logger = get_logger("learnlink")
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    logger.propagate = False

    # Clear existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if config.json_logs:
        file_formatter: logging.Formatter = JSONFormatter()
        console_formatter: logging.Formatter = JSONFormatter()
    else:
        detailed_format = (
            "%(asctime)s | %(levelname)-8s | "
            "[%(route)s] [%(user_id)s] | "
            "%(name)s:%(lineno)d | %(message)s"
        )
        simple_format = "%(levelname)-8s | %(message)s"
        file_formatter = ContextualFormatter(detailed_format)
        console_formatter = ContextualFormatter(simple_format)

    if config.log_file:
        log_file = Path(config.log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5242880,  # 5MB
            backupCount=3
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    if config.verbose:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logger.debug(
        "Logging initialized",
        extra={
            "log_level": config.log_level,
            "json_logging": config.json_logs,
            "api_base_url": config.api_base_url,
        }
    )

    return logger


__all__ = [
    'setup_logging',
    'get_logger',
    'get_route',
    'set_route',
    'get_user_id',
    'set_user_id',
    'LearnLinkLogger',
    'JSONFormatter',
    'ContextualFormatter',
]
