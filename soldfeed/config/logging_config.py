# soldfeed/config/logging_config.py

"""Logging for ingestion runs and the API process.

``setup_logging`` is called once per process by ``main.py``, whether it
serves the API, runs a headless ``--scrape`` or prints ``--show``. It
attaches two handlers to the ``soldfeed`` logger:

* a DEBUG file handler writing ``run_YYYYMMDD_HHMMSS.log`` under
  ``Settings.LOGS_DIR`` (or the directory passed in), and
* a WARNING stderr handler, so dropped items and upstream failures
  surface in cron mail and container logs.

Child loggers follow the component layout: ``soldfeed.finding_api`` and
``soldfeed.sold_page`` for the strategies, ``soldfeed.filters`` for the
normalizer, ``soldfeed.storage``, ``soldfeed.orchestrator`` and
``soldfeed.web``. One trigger can be followed from the upstream request
to the snapshot write in a single file.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from soldfeed.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_STDERR_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _run_log_path(logs_dir: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"run_{stamp}.log"


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the run-log and stderr handlers to the ``soldfeed`` logger.

    Args:
        logs_dir: Directory for the run log. Defaults to
            ``Settings.LOGS_DIR``.

    Returns:
        Path of this run's log file. When handlers are already attached
        (uvicorn reload, repeated test setup) nothing new is attached
        and the freshly computed path is returned unused.
    """
    logs_dir = logs_dir or Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = _run_log_path(logs_dir)

    soldfeed_logger = logging.getLogger("soldfeed")
    soldfeed_logger.setLevel(logging.DEBUG)

    if soldfeed_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(
        logging.Formatter(_STDERR_FORMAT, datefmt=_DATE_FORMAT)
    )

    soldfeed_logger.addHandler(file_handler)
    soldfeed_logger.addHandler(stderr_handler)

    soldfeed_logger.info(
        "Logging initialised for query '%s', run log: %s",
        Settings.SEARCH_KEYWORDS,
        log_file,
    )

    return log_file
