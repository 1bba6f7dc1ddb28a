"""Core data models for file allocation."""

from __future__ import annotations

from dataclasses import dataclass

from filealloc.core.errors import PlacementError

# Sizes and capacities are sorted as numpy int64
MAX_SIZE = 2**63 - 1


@dataclass(frozen=True)
class FileItem:
    """A file of fixed size waiting to be placed on a node."""

    name: str
    size: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("File name must not be empty")
        if not 0 <= self.size <= MAX_SIZE:
            raise ValueError(
                f"File '{self.name}' size {self.size} outside [0, {MAX_SIZE}]"
            )

    def __repr__(self) -> str:
        return f"FileItem('{self.name}', {self.size})"


@dataclass
class Node:
    """A storage node with a fixed capacity and a growing occupied load."""

    name: str
    capacity: int
    occupied: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.capacity <= MAX_SIZE:
            raise ValueError(
                f"Node '{self.name}' capacity {self.capacity} outside [0, {MAX_SIZE}]"
            )
        if not 0 <= self.occupied <= self.capacity:
            raise ValueError(
                f"Node '{self.name}' occupied {self.occupied} outside [0, {self.capacity}]"
            )

    @property
    def free(self) -> int:
        """Remaining capacity."""
        return self.capacity - self.occupied

    def can_accept(self, file: FileItem) -> bool:
        """Check if the file fits in the remaining capacity."""
        return file.size <= self.free

    def add(self, file: FileItem) -> None:
        """
        Place a file on this node.

        Args:
            file: File to place

        Raises:
            PlacementError: If the file does not fit. Callers must check
                can_accept first; this is never a recoverable condition.
        """
        if not self.can_accept(file):
            raise PlacementError(self.name, file.name, file.size, self.free)
        self.occupied += file.size

    def __repr__(self) -> str:
        return (
            f"Node('{self.name}', "
            f"free={self.free}/{self.capacity}, "
            f"used={self.occupied})"
        )
