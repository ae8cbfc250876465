from __future__ import annotations

from typing import Protocol


class SummaryWriterPort(Protocol):
    def write(self, prompt: str) -> str: ...
