import functools
import json
import logging
import os
import re
from typing import Any, Union

import commentjson
from python_log_indenter import IndentedLoggerAdapter

class ColorFormatter(logging.Formatter):
    """Console formatter coloring each line by level"""

    lightgray = "\x1b[1;30m"
    gray = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    format_string = "%(asctime)s - %(levelname)s - %(message)s"

    def __init__(self, use_colors=True):
        super().__init__()
        self.use_colors = use_colors

        if self.use_colors:
            self.FORMATS = {
                logging.DEBUG: self.lightgray + self.format_string + self.reset,
                logging.INFO: self.gray + self.format_string + self.reset,
                logging.WARNING: self.yellow + self.format_string + self.reset,
                logging.ERROR: self.red + self.format_string + self.reset,
                logging.CRITICAL: self.bold_red + self.format_string + self.reset
            }
        else:
            self.FORMATS = {
                level: self.format_string for level in [
                    logging.DEBUG, logging.INFO, logging.WARNING,
                    logging.ERROR, logging.CRITICAL
                ]
            }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt)
        return formatter.format(record)


class SimpleFormatter(logging.Formatter):
    """Plain `LEVEL: message` lines"""

    def __init__(self):
        super().__init__("%(levelname)s: %(message)s")


class StructuredFormatter(logging.Formatter):
    """One JSON object per log record"""

    def format(self, record):
        log_record = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_record)

LOG_FORMATS = ("color", "simple", "structured")

_logger = None
_logger_config = None

def logger(
    level: str = None,
    format_type: str = None,
    use_indentation: bool = None,
    use_colors: bool = None,
    reset: bool = False
) -> logging.Logger:
    """
    Get or create the propshape logger.

    Arguments left as None keep whatever the previous call configured, so
    library code can simply call `logger()` while the CLI decides the setup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Formatter type ('color', 'simple', 'structured')
        use_indentation: Whether to wrap the logger in IndentedLoggerAdapter
        use_colors: Force color usage on/off (auto-detect if None)
        reset: Force recreation of logger

    Returns:
        Configured logger instance
    """
    global _logger, _logger_config

    previous = _logger_config or {}
    level = level if level is not None else previous.get('level', 'INFO')
    format_type = format_type if format_type is not None else previous.get('format_type', 'color')
    use_indentation = use_indentation if use_indentation is not None else previous.get('use_indentation', True)
    use_colors = use_colors if use_colors is not None else previous.get('use_colors', None)

    current_config = {
        'level': level,
        'format_type': format_type,
        'use_indentation': use_indentation,
        'use_colors': use_colors
    }

    if not reset and _logger is not None and _logger_config == current_config:
        return _logger

    if use_colors is None:
        use_colors = hasattr(os.sys.stdout, 'isatty') and os.sys.stdout.isatty()

    log = logging.getLogger("propshape")
    log.handlers.clear()
    # The console handler owns the output; don't double-print through the root logger
    log.propagate = False

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    log.setLevel(numeric_level)

    if format_type == "simple":
        formatter = SimpleFormatter()
    elif format_type == "structured":
        formatter = StructuredFormatter()
    else:
        formatter = ColorFormatter(use_colors=use_colors)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    log.addHandler(console_handler)

    if use_indentation:
        _logger = IndentedLoggerAdapter(log)
        _logger.setLevel(numeric_level)
    else:
        _logger = log

    _logger_config = current_config

    return _logger

def set_log_level(level: str):
    """Set the level of the propshape logger, creating it if needed"""
    global _logger, _logger_config
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    if _logger is not None:
        if _logger_config:
            _logger_config['level'] = level.upper()

        underlying_logger = _logger.logger if hasattr(_logger, 'logger') else _logger
        underlying_logger.setLevel(numeric_level)

        for handler in underlying_logger.handlers:
            handler.setLevel(numeric_level)

        if hasattr(_logger, 'setLevel'):
            _logger.setLevel(numeric_level)
    else:
        logger(level=level.upper())


class PropshapeError(Exception):
    pass

class InvalidJsonError(PropshapeError):
    pass

class SourceFetchError(PropshapeError):
    pass

class QueryError(PropshapeError):
    pass

class ConfigError(PropshapeError):
    pass

class InvalidNameError(PropshapeError):
    pass


def loads(data: Union[str, bytes], expand_env: bool = False) -> Any:
    """Parse JSON text, tolerating comments. Raises InvalidJsonError."""
    if isinstance(data, bytes):
        data = data.decode('utf-8')
    if expand_env:
        data = expand_env_vars(data)
    try:
        return commentjson.loads(data)
    except Exception as e:
        raise InvalidJsonError(f"Invalid JSON: {e}") from e

def expand_env_vars(text: str) -> str:
    """Expand environment variables with support for ${VAR:-default} syntax."""

    def replacer(match):
        var_expr = match.group(1)
        if ':-' in var_expr:
            var_name, default_value = var_expr.split(':-', 1)
            default_value = default_value.strip('\'"')
            return os.environ.get(var_name, default_value)
        else:
            return os.environ.get(var_expr, match.group(0))

    text = re.sub(r'\$\{([^}]+)\}', replacer, text)
    text = os.path.expandvars(text)
    return text


def log(_func=None, *, my_logger: logging.Logger = None):
    """Log calls (DEBUG) and exceptions of the decorated function"""
    def decorator_log(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            log_to = my_logger if my_logger is not None else logger()
            args_repr = [repr(a) for a in args]
            kwargs_repr = [f"{k}={v!r}" for k, v in kwargs.items()]
            signature = ", ".join(args_repr + kwargs_repr)
            log_to.debug(f"function {func.__name__} called with args {signature}")
            try:
                return func(*args, **kwargs)
            except Exception as e:
                log_to.exception(f"Exception raised in {func.__name__}. exception: {str(e)}")
                raise
        return wrapper

    if _func is None:
        return decorator_log
    else:
        return decorator_log(_func)
