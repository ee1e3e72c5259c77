# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/kloudlib/credentials/generator.py

from __future__ import annotations

import secrets
import string
from typing import Protocol


class SecretGenerator(Protocol):
    def generate(self) -> str: ...


class RandomStringGenerator:
    """Random string from letters and digits, plus punctuation when special=True."""

    def __init__(self, length: int = 32, special: bool = False):
        if length < 1:
            raise ValueError(f"length must be positive, got {length}")
        self.length = length
        self.special = special

    @property
    def alphabet(self) -> str:
        alphabet = string.ascii_letters + string.digits
        if self.special:
            alphabet += "!@#$%&*()-_=+[]{}<>:?"
        return alphabet

    def generate(self) -> str:
        alphabet = self.alphabet
        return "".join(secrets.choice(alphabet) for _ in range(self.length))
