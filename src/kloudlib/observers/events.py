# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/observers/events.py

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single invocation
    env: str          # stack name
    context: Optional[str]  # kube-context

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(env: str, context: Optional[str], run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "env": env,
        "context": context,
    }


# ---------------------------------------------------------------------
# Repository lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class RepoAdded(BaseEvent):
    name: str
    url: str


# ---------------------------------------------------------------------
# Release lifecycle (Helm)
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ReleaseStarted(BaseEvent):
    name: str
    namespace: Optional[str]
    chart: str
    version: str

@dataclass(frozen=True)
class ReleaseSucceeded(BaseEvent):
    name: str
    duration_ms: int

@dataclass(frozen=True)
class ReleaseFailed(BaseEvent):
    name: str
    error: str
