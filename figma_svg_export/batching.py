"""
Request Batching

The Figma image endpoint limits how many ids fit in one request, so ids
are split into contiguous batches before rendering.
"""

from typing import List, Sequence

DEFAULT_BATCH_SIZE = 300


def plan_batches(ids: Sequence[str], batch_size: int = DEFAULT_BATCH_SIZE) -> List[List[str]]:
    """
    Split ids into ordered chunks of at most batch_size.

    An empty input gives no batches (never a single empty batch).
    """
    if batch_size <= 0:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    ids = list(ids)
    return [ids[i:i + batch_size] for i in range(0, len(ids), batch_size)]
