"""Allocation error definitions.

Only invariant violations are errors. A file that fits on no node is a
normal outcome and is reported through the allocation plan instead.
"""

from __future__ import annotations


class AllocationError(Exception):
    """Base class for broken allocation invariants."""


class PlacementError(AllocationError):
    """A file was added to a node without enough free space."""

    def __init__(self, node_name: str, file_name: str, size: int, free: int):
        self.node_name = node_name
        self.file_name = file_name
        self.size = size
        self.free = free
        super().__init__(
            f"Node '{node_name}' cannot accept file '{file_name}' "
            f"(size {size}, free {free})"
        )


class OrderInvariantError(AllocationError):
    """The node order sequence is no longer sorted."""
