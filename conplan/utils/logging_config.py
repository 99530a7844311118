# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Structured logging for conplan.

All conplan loggers are children of the ``conplan`` stdlib logger, which
owns two handlers installed on first use:

- console: one compact line per event, ``HH:MM:SS.mmm[lvl][module] event key=value``
- file: JSON lines in a rotating file under the log directory

Environment:
    CONPLAN_LOG_LEVEL: level name, INFO when unset
    CONPLAN_LOG_DIR: directory of the JSON log files
    CONPLAN_LOG_FILE: set to 0 to disable the file handler
"""

from collections.abc import Mapping
from datetime import datetime
import inspect
import logging
import logging.handlers
import os
from pathlib import Path
import sys
import tempfile
import threading
from typing import Any

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

from conplan.constants import CONPLAN_LOG_DIR, CONPLAN_PROJECT_ROOT

ROOT_LOGGER_NAME = "conplan"

_configure_lock = threading.Lock()
_log_file_path: Path | None = None
_configured = False

_MODULE_WIDTH = 28
_USE_COLORS = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
_RESET = "\033[0m"
_DIM = "\033[2m"
_LEVEL_COLORS = {
    "dbg": "\033[36m",
    "inf": "\033[32m",
    "war": "\033[33m",
    "err": "\033[31m",
    "cri": "\033[1;31m",
}
_DROPPED_KEYS = ("func_name", "lineno", "exc_info", "_record", "_from_structlog")


def _level_from_env() -> int:
    name = os.getenv("CONPLAN_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _log_directory() -> Path:
    override = os.getenv("CONPLAN_LOG_DIR")
    if override:
        candidates = [Path(override)]
    elif (CONPLAN_PROJECT_ROOT / ".git").exists():
        candidates = [CONPLAN_LOG_DIR]
    else:
        state_home = os.getenv("XDG_STATE_HOME")
        base = Path(state_home) if state_home else Path.home() / ".local" / "state"
        candidates = [base / "conplan" / "logs"]
    candidates.append(Path(tempfile.gettempdir()) / "conplan" / "logs")

    for directory in candidates:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            continue
        return directory
    raise OSError("No writable log directory")


def _file_logging_enabled() -> bool:
    return os.getenv("CONPLAN_LOG_FILE", "1").lower() not in ("0", "false", "no", "off")


def _render_console(logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> str:
    fields = dict(event_dict)
    for key in _DROPPED_KEYS:
        fields.pop(key, None)

    stamp = fields.pop("timestamp", None)
    try:
        moment = datetime.fromisoformat(stamp) if stamp else datetime.now()
    except (TypeError, ValueError):
        moment = datetime.now()
    clock = moment.strftime("%H:%M:%S") + f".{moment.microsecond // 1000:03d}"

    level = str(fields.pop("level", "???"))[:3].lower()
    module = str(fields.pop("logger", ""))
    if module.startswith(ROOT_LOGGER_NAME + "."):
        module = module[len(ROOT_LOGGER_NAME) + 1 :]
    module = module[-_MODULE_WIDTH:].ljust(_MODULE_WIDTH)
    event = fields.pop("event", "")
    exception = fields.pop("exception", None)

    context = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
    if _USE_COLORS:
        color = _LEVEL_COLORS.get(level, "")
        line = f"{_DIM}{clock}{_RESET}{color}[{level}]{_RESET}{_DIM}[{module}]{_RESET} {event}"
    else:
        line = f"{clock}[{level}][{module}] {event}"
    if context:
        line += " " + context
    if exception:
        line += "\n" + str(exception)
    return line


def _configure(level: int) -> None:
    """Install the structlog pipeline and the handlers of the root conplan logger, once."""
    global _configured, _log_file_path

    with _configure_lock:
        if _configured:
            return

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                CallsiteParameterAdder(
                    parameters=[CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO]
                ),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.handlers.clear()
        root.setLevel(level)
        root.propagate = False

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(structlog.stdlib.ProcessorFormatter(processor=_render_console))
        root.addHandler(console)

        if _file_logging_enabled():
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            _log_file_path = _log_directory() / f"conplan_{timestamp}_{os.getpid()}.jsonl"
            file_handler = logging.handlers.RotatingFileHandler(
                _log_file_path,
                maxBytes=10 * 1024 * 1024,
                backupCount=20,
                encoding="utf-8",
            )
            file_handler.setFormatter(
                structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
            )
            root.addHandler(file_handler)

        _configured = True


def get_log_file_path() -> Path | None:
    """Path of the JSON log file, None until logging is configured or when file logging is off."""
    return _log_file_path


def setup_logger(*, level: int | None = None) -> Any:
    """Return a structlog logger named after the calling module.

    Modules outside the conplan package get a ``conplan.`` prefix so their
    events reach the same handlers.

    Args:
        level: Level of this logger only. The process level comes from
            CONPLAN_LOG_LEVEL.

    Example:
        logger = setup_logger()
        logger.info("Roadmap saved", file=str(path), nodes=12)
    """
    _configure(_level_from_env())

    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = caller.f_globals.get("__name__", "") if caller is not None else ""
    del frame, caller
    if module != ROOT_LOGGER_NAME and not module.startswith(ROOT_LOGGER_NAME + "."):
        module = f"{ROOT_LOGGER_NAME}.{module or 'unknown'}"

    if level is not None:
        logging.getLogger(module).setLevel(level)
    return structlog.get_logger(module)
