# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/credentials/store.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from .generator import SecretGenerator

log = logging.getLogger("kloudlib")


def _as_str(v: Any) -> str:
    if v is None:
        return ""
    if isinstance(v, (bytes, bytearray)):
        return v.decode("utf-8", errors="replace")
    return str(v)


class SecretStore:
    """
    Generated credentials kept in a flat secrets.yaml (key -> value).

    A value is generated only the first time its key is requested and
    written back to the file, so later runs reuse it.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._raw: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._raw is None:
            if self.path.exists():
                data = yaml.safe_load(self.path.read_text()) or {}
                if not isinstance(data, dict):
                    raise ValueError(f"Expected mapping in {self.path}, got {type(data)}")
                self._raw = {str(k): _as_str(v) for k, v in data.items()}
            else:
                self._raw = {}
        return self._raw

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._load().get(key, default)

    def put(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(data, sort_keys=True))
        self.path.chmod(0o600)

    def get_or_create(self, key: str, generator: SecretGenerator) -> str:
        existing = self.get(key)
        if existing:
            return existing

        log.debug("Generating secret %s into %s", key, self.path)
        value = generator.generate()
        self.put(key, value)
        return value
