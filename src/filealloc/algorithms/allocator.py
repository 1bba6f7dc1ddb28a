"""First-fit-decreasing allocation of files to nodes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from filealloc.algorithms.ordering import (
    file_order,
    find_new_position,
    is_sorted,
    node_order,
    node_precedes,
    shift_entry,
)
from filealloc.core.errors import OrderInvariantError
from filealloc.core.models import FileItem, Node

logger = logging.getLogger(__name__)


@dataclass
class AllocationResult:
    """
    Outcome of one allocation pass.

    Attributes:
        files: Files in input order
        nodes: Nodes in input order, with their final load
        plan: For each file, the index of its node in ``nodes``, or None
            when no node could accept it
    """

    files: list[FileItem]
    nodes: list[Node]
    plan: list[int | None] = field(default_factory=list)

    def assignments(self) -> Iterator[tuple[FileItem, Node | None]]:
        """Yield (file, node or None) pairs in file input order."""
        for file, n_node in zip(self.files, self.plan):
            yield file, (None if n_node is None else self.nodes[n_node])

    @property
    def placed_count(self) -> int:
        return sum(1 for n_node in self.plan if n_node is not None)

    @property
    def unassigned(self) -> list[FileItem]:
        """Files that did not fit anywhere, in input order."""
        return [f for f, n_node in zip(self.files, self.plan) if n_node is None]

    def node_files(self) -> dict[int, list[FileItem]]:
        """Map each node index to the files placed on it."""
        placed: dict[int, list[FileItem]] = {i: [] for i in range(len(self.nodes))}
        for file, n_node in zip(self.files, self.plan):
            if n_node is not None:
                placed[n_node].append(file)
        return placed


class FirstFitDecreasingAllocator:
    """
    Greedy first-fit-decreasing allocator.

    Files are taken largest first. Each goes to the first node, in
    least-loaded order, that still has room for it. After a placement the
    updated node is moved right in the node ordering to keep it sorted.
    """

    def __init__(self, verify_order: bool = False):
        """
        Args:
            verify_order: Check the node ordering after every placement
                and raise OrderInvariantError if it is not sorted.
        """
        self.verify_order = verify_order

    def allocate(self, files: Sequence[FileItem], nodes: Sequence[Node]) -> AllocationResult:
        """
        Allocate files to nodes. Node loads are updated in place.

        Args:
            files: Files to place
            nodes: Candidate nodes

        Returns:
            AllocationResult with one plan entry per file
        """
        result = AllocationResult(files=list(files), nodes=list(nodes))
        result.plan = [None] * len(result.files)

        precedes = node_precedes(result.nodes)
        order = node_order(result.nodes)

        for idx_f in file_order(result.files):
            file = result.files[idx_f]
            j = self._first_fit(file, order, result.nodes)

            if j is None:
                logger.debug("No node can accept %r", file)
                continue

            idx_n = order[j]
            node = result.nodes[idx_n]
            node.add(file)
            result.plan[idx_f] = idx_n

            new_pos = find_new_position(j, len(order), order, precedes)
            shift_entry(order, j, new_pos)
            logger.debug("Placed %r on %r (order %d -> %d)", file, node, j, new_pos)

            if self.verify_order and not is_sorted(order, precedes):
                raise OrderInvariantError(
                    f"Node order unsorted after placing '{file.name}' on '{node.name}'"
                )

        logger.info(
            "Allocated %d/%d files across %d nodes",
            result.placed_count, len(result.files), len(result.nodes),
        )
        return result

    @staticmethod
    def _first_fit(file: FileItem, order: list[int], nodes: list[Node]) -> int | None:
        """Return the first position in ``order`` whose node accepts the file."""
        for j, idx_n in enumerate(order):
            if nodes[idx_n].can_accept(file):
                return j
        return None


def allocate_files(
    files: Sequence[FileItem],
    nodes: Sequence[Node],
    verify_order: bool = False,
) -> AllocationResult:
    """Run a single first-fit-decreasing pass."""
    return FirstFitDecreasingAllocator(verify_order=verify_order).allocate(files, nodes)
