"""Split a file into contiguous chunk descriptors."""

import math
import os

from chunkscan.models import ChunkDescriptor


def plan_chunks(file_path: str, count: int) -> list[ChunkDescriptor]:
    """Cut a file into ``count`` ranges of ``ceil(size / count)`` bytes.

    The last range may be shorter; empty ranges are not emitted, so a small
    file can yield fewer descriptors than requested.

    Args:
        file_path: File to plan
        count: Desired number of chunks, at least 1

    Returns:
        Descriptors ordered by index, covering the file exactly once
    """
    if count < 1:
        raise ValueError(f"Chunk count must be at least 1, got {count}")

    path = str(file_path)
    size = os.path.getsize(path)
    if size == 0:
        return []

    step = math.ceil(size / count)
    chunks = []
    for index, offset in enumerate(range(0, size, step)):
        chunks.append(
            ChunkDescriptor(
                index=index,
                file_path=path,
                offset=offset,
                size=min(step, size - offset),
            )
        )
    return chunks
