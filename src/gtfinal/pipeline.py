"""
Pipeline Orchestrator: finalizes a batch of merged records.

This module handles:
1. Building one shared RecordFinalizer (and its likelihood table).
2. Finalizing records in parallel; records are independent of each other.
3. Dropping sites that fail the reporting thresholds.
4. Reporting kept/dropped counts on the console.
"""

import logging
from collections.abc import Iterable

from rich.console import Console

from .annotations.registry import AnnotationRegistry
from .engine import RecordFinalizer
from .models.core import FinalizerConfig, VariantRecord
from .parallel import ParallelProcessor
from .utils.logging import log_call, timed

logger = logging.getLogger(__name__)


class Pipeline:
    def __init__(
        self,
        config: FinalizerConfig | None = None,
        n_jobs: int = 1,
        backend: str = "threading",
        registry: AnnotationRegistry | None = None,
        console: Console | None = None,
    ):
        self.config = config or FinalizerConfig()
        self.finalizer = RecordFinalizer(self.config, registry=registry)
        self.processor = ParallelProcessor(n_jobs=n_jobs, backend=backend)
        self.console = console or Console(stderr=True)

    def finalize_one(self, record: VariantRecord) -> VariantRecord | None:
        return self.finalizer.finalize(record)

    @log_call(logger)
    def run(self, records: Iterable[VariantRecord], show_progress: bool = False) -> list[VariantRecord]:
        """
        Finalize ``records`` and return the ones that pass, in input order.

        Raises:
            BadInputError: If any record has a malformed genotype; the whole batch fails.
        """
        records = list(records)
        if not records:
            self.console.print("[bold yellow]No records to finalize.[/bold yellow]")
            return []

        with timed(f"Finalizing {len(records)} records", logger):
            results = self.processor.map(
                self.finalize_one,
                records,
                description="Finalizing records",
                show_progress=show_progress,
            )

        finalized = [r for r in results if r is not None]
        dropped = len(records) - len(finalized)
        self.console.print(
            f"Finalized [bold]{len(finalized)}[/bold] / {len(records)} records "
            f"([yellow]{dropped}[/yellow] below reporting thresholds)."
        )
        return finalized
