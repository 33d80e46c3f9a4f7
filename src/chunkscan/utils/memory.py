"""Process memory sampling for job resource reports."""

import psutil

from chunkscan.models import MemoryUsage


def sample_memory(buffer_bytes: int = 0) -> MemoryUsage:
    """Snapshot the current process RSS alongside the job's buffer size."""
    rss = psutil.Process().memory_info().rss
    return MemoryUsage(rss_bytes=int(rss), buffer_bytes=int(buffer_bytes))
