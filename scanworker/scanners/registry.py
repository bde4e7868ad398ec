from __future__ import annotations

from typing import Iterable

from scanworker.domain.errors import UnsupportedToolError

from .base import ScannerAdapter


class ScannerRegistry:
    """Explicit tool name -> adapter table handed to the orchestrator."""

    def __init__(self, adapters: Iterable[ScannerAdapter]):
        self._by_name = {a.tool_name().lower(): a for a in adapters}

    def list(self) -> list[str]:
        return sorted(self._by_name.keys())

    def supports(self, name: str) -> bool:
        return name.lower() in self._by_name

    def get(self, name: str) -> ScannerAdapter:
        try:
            return self._by_name[name.lower()]
        except KeyError:
            raise UnsupportedToolError(name) from None
