"""Index orderings over files and nodes.

Both orderings are permutations of entity indices. The entity lists
themselves are never reordered, so the allocation plan can be reported
back in input order.

The node ordering is kept sorted under ``node_precedes`` for the whole
allocation pass. After a placement only one node's key changes, and it
can only grow, so the node is moved right with ``find_new_position`` and
``shift_entry`` instead of re-sorting everything.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from filealloc.core.errors import OrderInvariantError
from filealloc.core.models import FileItem, Node

Comparator = Callable[[int, int], bool]


def file_order(files: Sequence[FileItem]) -> list[int]:
    """
    Sort file indices by size, largest first.

    Equal sizes keep their input order.

    Args:
        files: Files in input order

    Returns:
        Permutation of range(len(files))
    """
    sizes = np.fromiter((f.size for f in files), dtype=np.int64, count=len(files))
    return np.argsort(-sizes, kind="stable").tolist()


def node_sort_key(node: Node) -> tuple[int, int]:
    """Least occupied first; for equal load, most free space first."""
    return node.occupied, -node.free


def node_precedes(nodes: Sequence[Node]) -> Comparator:
    """
    Build the strict node comparator over indices into ``nodes``.

    The comparator reads the nodes' current load on every call and keeps
    no state of its own.
    """

    def precedes(a: int, b: int) -> bool:
        return node_sort_key(nodes[a]) < node_sort_key(nodes[b])

    return precedes


def node_order(nodes: Sequence[Node]) -> list[int]:
    """
    Sort node indices by (occupied ascending, free descending).

    Equal keys keep their input order.
    """
    occupied = np.fromiter((n.occupied for n in nodes), dtype=np.int64, count=len(nodes))
    free = np.fromiter((n.free for n in nodes), dtype=np.int64, count=len(nodes))
    # lexsort treats the last key as primary
    return np.lexsort((-free, occupied)).tolist()


def find_new_position(dw: int, up: int, order: Sequence[int], precedes: Comparator) -> int:
    """
    Find where the entry at ``dw`` belongs inside ``order[dw:up]``.

    ``order[dw + 1:up]`` must already be sorted. The entry at ``dw`` is
    compared against the midpoint of a shrinking bracket until the bracket
    is one slot wide. The result is the rightmost position the entry can
    take without ordering after something that should follow it, so equal
    keys end up to its left.

    Args:
        dw: Position of the entry whose key grew
        up: Exclusive upper bound, normally len(order)
        order: Index sequence
        precedes: Strict comparator over indices

    Returns:
        Target position, ``dw <= result < up``
    """
    fixed = order[dw]
    output = dw
    while True:
        mp = (output + up) // 2
        if precedes(fixed, order[mp]):
            up = mp
        else:
            output = mp
        if up - output <= 1:
            return output


def shift_entry(order: list[int], current: int, target: int) -> None:
    """
    Move ``order[current]`` to ``target``, shifting the entries in between
    one slot left.

    Relative order of every other entry is preserved.

    Raises:
        OrderInvariantError: If target lies left of current.
    """
    if current == target:
        return
    if current > target:
        raise OrderInvariantError(
            f"Cannot shift entry left (from {current} to {target})"
        )
    saved = order[current]
    order[current:target] = order[current + 1:target + 1]
    order[target] = saved


def is_sorted(order: Sequence[int], precedes: Comparator) -> bool:
    """Check that no entry should come before its left neighbour."""
    return not any(precedes(order[k + 1], order[k]) for k in range(len(order) - 1))
