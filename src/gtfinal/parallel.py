"""
Record-level parallelism with joblib.

Merged records are finalized independently of each other, so a batch can be
fanned out over joblib workers. Results always come back in input order.
"""

import logging
import os
from collections.abc import Callable, Sequence
from typing import Any

from joblib import Parallel, delayed
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

logger = logging.getLogger(__name__)


def resolve_n_jobs(n_jobs: int) -> int:
    """Turn a joblib-style job count (-1 = all CPUs) into a positive worker count."""
    if n_jobs == -1:
        return os.cpu_count() or 1
    if n_jobs < 1:
        raise ValueError(f"n_jobs must be positive or -1, got {n_jobs}")
    return n_jobs


class ParallelProcessor:
    """
    Applies a function to every item of a batch using a joblib backend.

    ``threading`` is the default backend. Process backends (``loky``,
    ``multiprocessing``) require the mapped function to pickle.
    """

    def __init__(self, n_jobs: int = 1, backend: str = "threading", verbose: int = 0):
        self.n_jobs = resolve_n_jobs(n_jobs)
        self.backend = backend
        self.verbose = verbose

    def _parallel(self, **kwargs: Any) -> Parallel:
        return Parallel(n_jobs=self.n_jobs, backend=self.backend, verbose=self.verbose, **kwargs)

    def map(
        self,
        func: Callable,
        items: Sequence[Any],
        description: str = "Processing",
        show_progress: bool = True,
    ) -> list[Any]:
        """
        Apply ``func`` to each of ``items``.

        Args:
            func: Called once per item.
            items: The batch.
            description: Progress bar label.
            show_progress: Draw a rich progress bar on stderr.

        Returns:
            ``[func(item) for item in items]``, computed in parallel.
        """
        logger.debug(
            "Mapping %s over %d items (n_jobs=%d, backend=%s)",
            getattr(func, "__name__", repr(func)),
            len(items),
            self.n_jobs,
            self.backend,
        )
        tasks = (delayed(func)(item) for item in items)
        if not show_progress:
            return list(self._parallel()(tasks))

        columns = (
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
        )
        results: list[Any] = []
        with Progress(*columns, console=Console(stderr=True)) as progress:
            bar = progress.add_task(f"[cyan]{description}...", total=len(items))
            # the generator yields in submission order as results complete
            with self._parallel(return_as="generator") as parallel:
                for result in parallel(tasks):
                    results.append(result)
                    progress.advance(bar)
        return results


def parallel_map(
    func: Callable,
    items: Sequence[Any],
    n_jobs: int = 1,
    backend: str = "threading",
    description: str = "Processing",
    show_progress: bool = True,
) -> list[Any]:
    """One-off :meth:`ParallelProcessor.map` without keeping a processor around."""
    return ParallelProcessor(n_jobs=n_jobs, backend=backend).map(
        func, items, description, show_progress
    )
