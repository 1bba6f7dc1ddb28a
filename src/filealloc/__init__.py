"""File-to-node allocation with first-fit-decreasing placement."""

from filealloc.algorithms.allocator import (
    AllocationResult,
    FirstFitDecreasingAllocator,
    allocate_files,
)
from filealloc.core.errors import AllocationError, OrderInvariantError, PlacementError
from filealloc.core.models import FileItem, Node

__version__ = "0.1.0"

__all__ = [
    "AllocationError",
    "AllocationResult",
    "FileItem",
    "FirstFitDecreasingAllocator",
    "Node",
    "OrderInvariantError",
    "PlacementError",
    "allocate_files",
]
