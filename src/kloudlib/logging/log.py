# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

#src/kloudlib/logging/log.py

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

DEFAULT_LOG_DIR = Path.home() / ".kloudlib" / "logs"


def _slug(value: str) -> str:
    # stack names end up in file names
    return re.sub(r"[^A-Za-z0-9_.-]+", "-", value).strip("-.") or "stack"


def run_log_path(base_dir: Path, stack: str, command: str, run_id: str) -> Path:
    """<base_dir>/<stack>/<command>-<utc ts>-<run id>.log, one file per CLI run."""
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return base_dir / _slug(stack) / f"{command}-{ts}-{run_id}.log"


def init_logging(
    *,
    stack: str,
    command: str,
    components: Optional[Iterable[str]] = None,
    base_dir: Path | None = None,
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Wire the "kloudlib" logger for one deploy/destroy run of a stack.

    Everything goes to the run log at DEBUG; the console gets INFO
    (DEBUG when verbose). The header records which stack, command and
    component instances the run was for, so logs from several stacks can
    share a directory. Returns (logger, run_id, log_path); run_id is
    reused as the event context of the run.
    """
    run_id = str(uuid.uuid4())

    log_path = run_log_path(base_dir or DEFAULT_LOG_DIR, stack, command, run_id)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("kloudlib")
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    selected = ", ".join(components) if components else "all"
    logger.debug(f"=== kloudlib {command}: stack {stack} [{selected}] ===")
    logger.debug(f"run_id={run_id}")
    logger.debug(f"log_file={log_path}")

    return logger, run_id, log_path
