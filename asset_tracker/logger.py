"""
Application logging.

Every module asks for ``get_logger("asset_tracker.<area>")``. The first call
configures the ``asset_tracker`` logger tree once per process: one JSON
object per line, written to

    <LOG_DIR>/asset_tracker.log   INFO and above
    <LOG_DIR>/errors.log          ERROR and above
    stderr                        everything

Log files are truncated when the process starts.
"""

import json
import logging
import os
import threading
from pathlib import Path

ROOT_LOGGER_NAME = "asset_tracker"


class JsonFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON object"""

    FIELDS = (
        ("level", "levelname"),
        ("logger", "name"),
        ("module", "module"),
        ("function", "funcName"),
        ("line", "lineno"),
    )

    def format(self, record) -> str:
        entry = {"time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S")}
        entry.update({key: getattr(record, attr) for key, attr in self.FIELDS})
        entry["message"] = record.getMessage()

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exc_info"] = record.exc_text
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


class SingletonLogger:
    """Holds the configured root of the asset_tracker logger tree"""

    _lock = threading.Lock()
    _root = None

    @classmethod
    def root(cls) -> logging.Logger:
        if cls._root is None:
            with cls._lock:
                if cls._root is None:
                    cls._root = cls._configure()
        return cls._root

    @staticmethod
    def _configure() -> logging.Logger:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(logging.DEBUG)
        root.handlers.clear()
        root.propagate = False

        log_dir = Path(os.environ.get("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = JsonFormatter()

        for handler, level in (
            (logging.FileHandler(log_dir / "asset_tracker.log", mode='w', encoding='utf-8'), logging.INFO),
            (logging.FileHandler(log_dir / "errors.log", mode='w', encoding='utf-8'), logging.ERROR),
            (logging.StreamHandler(), logging.DEBUG),
        ):
            handler.setLevel(level)
            handler.setFormatter(formatter)
            root.addHandler(handler)

        return root


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Logger for ``name``, a dotted child of ``asset_tracker``.

    Names outside the tree are nested under it so that every record reaches
    the configured handlers.
    """
    root = SingletonLogger.root()
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
