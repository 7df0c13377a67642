"""Order-preserving bounded-concurrency map over a ``ThreadPoolExecutor``.

Used by the CSV importer to validate rows in parallel when a caller asks for
more than one worker. Rows have no cross-row dependency, but callers rely on
output order matching input order, which this helper guarantees.

- ``concurrency`` caps the number of mapper calls in flight.
- The first mapper exception propagates and not-yet-started work is cancelled.
- ``concurrency == 1`` runs inline without creating a pool.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TypeVar

InT = TypeVar("InT")
OutT = TypeVar("OutT")


def p_map(
    iterable: Iterable[InT],
    mapper: Callable[[InT], OutT],
    *,
    concurrency: int,
) -> list[OutT]:
    """Map ``iterable`` through ``mapper``; results come back in input order."""

    if not isinstance(concurrency, int) or isinstance(concurrency, bool) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    if concurrency == 1:
        return [mapper(item) for item in iterable]

    it = enumerate(iterable)
    results: dict[int, OutT] = {}
    future_to_idx: dict[Future, int] = {}

    def _submit(pool: ThreadPoolExecutor) -> Future | None:
        try:
            idx, item = next(it)
        except StopIteration:
            return None
        fut = pool.submit(mapper, item)
        future_to_idx[fut] = idx
        return fut

    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        active: set[Future] = set()
        for _ in range(concurrency):
            fut = _submit(pool)
            if fut is None:
                break
            active.add(fut)

        while active:
            done, active = wait(active, return_when=FIRST_COMPLETED)
            for fut in done:
                idx = future_to_idx.pop(fut)
                try:
                    results[idx] = fut.result()
                except Exception:
                    pool.shutdown(wait=False, cancel_futures=True)
                    raise
            # Keep the window full: one new submission per completion.
            for _ in range(len(done)):
                fut = _submit(pool)
                if fut is None:
                    break
                active.add(fut)

    return [results[i] for i in range(len(results))]


__all__ = ["p_map"]
