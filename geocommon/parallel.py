"""
Fan-out of independent point computations over a thread pool.
"""

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, List, Optional, Sequence, TypeVar
import os

from geocommon.cancellation import CancellationToken, OperationCancelledError
from geocommon.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_DEFAULT_MAX_WORKERS = min(32, (os.cpu_count() or 1) + 4)


def parallel_map(
    fn: Callable[[T], R],
    items: Sequence[T],
    token: Optional[CancellationToken] = None,
    max_workers: Optional[int] = None
) -> List[R]:
    """Apply ``fn`` to every item on a thread pool and join the results.

    Parameters
    ----------
    fn : callable
        Pure function of one item.
    items : sequence
        Work items; one unit of work is submitted per item.
    token : CancellationToken, optional
        Checked before each item runs; its deadline bounds the join.
    max_workers : int, optional
        Pool size. Defaults to ``min(32, cpu_count + 4)`` capped at the
        number of items.

    Returns
    -------
    list
        ``fn(item)`` for each item, in input order.

    Raises
    ------
    OperationCancelledError
        If the token trips before all items complete. Outstanding work is
        cancelled before raising.
    """
    if not items:
        return []
    if token is not None:
        token.check()

    def run(item: T) -> R:
        if token is not None:
            token.check()
        return fn(item)

    workers = min(max_workers or _DEFAULT_MAX_WORKERS, len(items))
    logger.debug(f"Fanning out {len(items)} items over {workers} workers")

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="GeodesyWorker") as executor:
        futures = [executor.submit(run, item) for item in items]
        timeout = token.remaining() if token is not None else None
        done, pending = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)
        if pending:
            for future in pending:
                future.cancel()
            # FIRST_EXCEPTION returns early on failure; surface that failure
            for future in done:
                if future.exception() is not None:
                    raise future.exception()
            logger.info(f"Fan-out cancelled with {len(pending)} of {len(items)} items outstanding")
            raise OperationCancelledError("Operation exceeded its deadline")

    # This will raise any exception raised by fn
    return [future.result() for future in futures]
