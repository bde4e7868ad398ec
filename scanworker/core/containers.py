from __future__ import annotations

from scanworker.core.config import settings
from scanworker.scanners.nikto import NiktoScanner
from scanworker.scanners.nuclei import NucleiScanner
from scanworker.scanners.registry import ScannerRegistry
from scanworker.scanners.zap import ZapScanner
from scanworker.services.callback_service import CallbackDispatcher
from scanworker.services.scan_service import ScanOrchestrator


def build_scanner_registry() -> ScannerRegistry:
    return ScannerRegistry([NucleiScanner(), ZapScanner(), NiktoScanner()])


def build_orchestrator() -> ScanOrchestrator:
    """Wire the production orchestrator from settings.

    To add a new tool:
    1. Write a normalizer in ``scanworker/normalizers/``
    2. Write an adapter in ``scanworker/scanners/`` that uses it
    3. Register the adapter in ``build_scanner_registry`` here
    """
    return ScanOrchestrator(
        build_scanner_registry(),
        CallbackDispatcher(timeout_sec=settings.CALLBACK_TIMEOUT_SEC),
        reject_unsupported_tools=settings.REJECT_UNSUPPORTED_TOOLS,
        max_parallel_tools=settings.MAX_PARALLEL_TOOLS,
    )
