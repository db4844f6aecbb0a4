"""
Row fork-join for stencil solvers.

``RowPool.run(fn, ny)`` calls ``fn(y)`` once per row and blocks until
every row is done. Row tasks must only read the previous step's grids
and write their own row of the output grids, so no locking is needed.
The heavy lifting inside each task is numpy slicing, which releases the
GIL, so a thread pool gives real overlap.
"""

import os
from concurrent.futures import ThreadPoolExecutor


def default_workers():
    return min(8, os.cpu_count() or 1)


class RowPool:
    """Thread pool that fans a step out over grid rows."""

    def __init__(self, workers=None):
        self.workers = default_workers() if workers is None else max(1, int(workers))
        self._executor = None

    def _get_executor(self):
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers, thread_name_prefix="field-row")
        return self._executor

    def run(self, fn, ny):
        """Run fn(y) for y in range(ny). Re-raises the first task error."""
        if self.workers == 1:
            for y in range(ny):
                fn(y)
            return
        # list() drains the iterator so every row finishes (or raises)
        list(self._get_executor().map(fn, range(ny)))

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
