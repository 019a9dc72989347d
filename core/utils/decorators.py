"""
Utility decorators and context managers.
"""

import time
from contextlib import contextmanager
from typing import Dict, Iterator


@contextmanager
def timer() -> Iterator[Dict[str, int]]:
    """
    Measure elapsed wall time of a block.

    The yielded dict gets its "ms" key set when the block exits, so read it
    after the with statement:

        with timer() as t:
            do_work()
        elapsed = t["ms"]
    """
    result = {"ms": 0}
    start = time.perf_counter()
    try:
        yield result
    finally:
        result["ms"] = int((time.perf_counter() - start) * 1000)
