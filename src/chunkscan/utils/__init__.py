"""Utility functions for chunkscan."""

from chunkscan.utils.memory import sample_memory
from chunkscan.utils.signature import classify, classify_file

__all__ = ["classify", "classify_file", "sample_memory"]
