"""Random dataset generation for allocation experiments."""

import random

from filealloc.core.models import FileItem, Node


def generate_files(
    count: int = 500,
    seed: int | None = None,
    min_size: int = 1,
    max_size: int = 1000,
) -> list[FileItem]:
    """
    Generate random files.

    Args:
        count: Number of files to generate
        seed: Random seed for reproducibility (default: None)
        min_size: Smallest file size (inclusive)
        max_size: Largest file size (inclusive)

    Returns:
        Files named file_0000, file_0001, ...
    """
    rng = random.Random(seed)
    return [
        FileItem(name=f"file_{i:04d}", size=rng.randint(min_size, max_size))
        for i in range(count)
    ]


def generate_nodes(
    count: int = 20,
    seed: int | None = None,
    min_capacity: int = 5000,
    max_capacity: int = 30000,
) -> list[Node]:
    """
    Generate empty nodes with random capacities.

    Args:
        count: Number of nodes to generate
        seed: Random seed for reproducibility (default: None)
        min_capacity: Smallest capacity (inclusive)
        max_capacity: Largest capacity (inclusive)

    Returns:
        Nodes named node_000, node_001, ...
    """
    rng = random.Random(seed)
    return [
        Node(name=f"node_{i:03d}", capacity=rng.randint(min_capacity, max_capacity))
        for i in range(count)
    ]
