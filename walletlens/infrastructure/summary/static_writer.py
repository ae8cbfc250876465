from __future__ import annotations

import threading
from typing import Callable

from walletlens.domain.ports.summary_writer import SummaryWriterPort


class StaticSummaryWriter:
    """
    Offline writer used when no text-generation provider is wired in.

    A blank reply makes the insights service use the fallback text of the
    selected summary variant.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text

    def write(self, prompt: str) -> str:
        return self._text


_WRITER_LOCK = threading.Lock()
_WRITER: SummaryWriterPort | None = None


def get_summary_writer(
    factory: Callable[[], SummaryWriterPort] = StaticSummaryWriter,
) -> SummaryWriterPort:
    """
    Return the process-wide summary writer, building it on first use.

    The writer is constructed exactly once; later calls ignore ``factory``.
    """
    global _WRITER
    if _WRITER is not None:
        return _WRITER
    with _WRITER_LOCK:
        if _WRITER is None:
            _WRITER = factory()
        return _WRITER
