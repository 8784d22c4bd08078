import logging
import logging.handlers
from typing import Any, MutableMapping, Optional, Tuple

_LOGGER_NAME = "fractalzoom"

# numba logs every compilation pass at DEBUG
_NOISY_LOGGERS = ("numba", "PIL")


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Package logger, or a child of it for one component (``fractalzoom.render`` etc.)."""
    if component:
        return logging.getLogger(f"{_LOGGER_NAME}.{component}")
    return logging.getLogger(_LOGGER_NAME)


class FrameLogger(logging.LoggerAdapter):
    """Prefixes every record with the frame it belongs to."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        frame = self.extra.get("frame") if self.extra else None
        if frame is None:
            return msg, kwargs
        return f"[Frame {frame}] {msg}", kwargs


def frame_logger(component: str, frame: Optional[str]) -> FrameLogger:
    return FrameLogger(get_logger(component), {"frame": frame})


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(threadName)s %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def configure_root_logging(
    *,
    level: int = logging.INFO,
    console: bool = True,
    log_file: Optional[str] = "fractalzoom.log",
    rotate_bytes: int = 5 * 1024 * 1024,
    rotate_count: int = 5,
) -> logging.Logger:
    """Attach console and rotating-file handlers to the package logger.

    Safe to call repeatedly: handlers from an earlier call are closed first.
    """
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    close_handlers()
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    fmt = _build_formatter()
    handlers = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file, maxBytes=rotate_bytes, backupCount=rotate_count, encoding="utf-8"
        ))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    return logger


def close_handlers() -> None:
    logger = get_logger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
