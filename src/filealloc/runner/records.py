"""Line-oriented record files for files and nodes.

Each record is ``<name> <size>`` separated by whitespace. Lines starting
with ``#`` are comments and blank lines are skipped.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Literal, TextIO

from pydantic import BaseModel, Field, ValidationError

from filealloc.algorithms.allocator import AllocationResult
from filealloc.core.models import MAX_SIZE, FileItem, Node

logger = logging.getLogger(__name__)

# Plain ASCII digits with an optional sign; range checks are left to RecordSchema
SIZE_PATTERN = re.compile(r"-?[0-9]+")

NULL_NODE = "NULL"


class RecordError(ValueError):
    """A record file could not be read or contains a faulty line."""

    def __init__(self, path: Path | str, message: str, line_no: int | None = None, line: str | None = None):
        self.path = Path(path)
        self.line_no = line_no
        self.line = line
        text = f"{message} in input file '{self.path}'"
        if line_no is not None:
            text += f" (line {line_no}: {line!r})"
        super().__init__(text)


class RecordSchema(BaseModel):
    """Validated ``<name> <size>`` record."""

    name: str = Field(min_length=1)
    size: int = Field(ge=0, le=MAX_SIZE)


def parse_record(line: str) -> RecordSchema | None:
    """
    Parse one line.

    Returns:
        The record, or None for comments and blank lines

    Raises:
        ValueError: For a wrong field count or an invalid size
    """
    if line.startswith("#"):
        return None

    fields = line.split()
    if not fields:
        return None
    if len(fields) > 2:
        raise ValueError("Too many fields")
    if len(fields) < 2:
        raise ValueError("Missing size")

    name, size = fields
    if not SIZE_PATTERN.fullmatch(size):
        raise ValueError(f"Size is not an integer: {size!r}")

    try:
        return RecordSchema(name=name, size=int(size))
    except ValidationError as exc:
        reason = "; ".join(err["msg"] for err in exc.errors())
        raise ValueError(f"Invalid size {size}: {reason}") from exc


def read_records(path: Path | str, kind: Literal["file", "node"]) -> list[FileItem] | list[Node]:
    """
    Read files or nodes from a record file.

    Args:
        path: Record file path
        kind: "file" builds FileItem objects, "node" builds Node objects

    Returns:
        Entities in file order

    Raises:
        RecordError: If the file cannot be opened or a line is faulty
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RecordError(path, f"Cannot open input file ({exc.strerror})") from exc
    except UnicodeDecodeError as exc:
        raise RecordError(path, f"Input file is not valid UTF-8 (byte {exc.start})") from exc

    entities = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        try:
            record = parse_record(line)
        except ValueError as exc:
            raise RecordError(path, str(exc), line_no=line_no, line=line) from exc
        if record is None:
            continue
        if kind == "file":
            entities.append(FileItem(name=record.name, size=record.size))
        else:
            entities.append(Node(name=record.name, capacity=record.size))

    logger.info("Read %d %s records from %s", len(entities), kind, path)
    return entities


def write_plan(result: AllocationResult, stream: TextIO) -> None:
    """Write ``<file-name> <node-name-or-NULL>`` lines in file input order."""
    for file, node in result.assignments():
        stream.write(f"{file.name} {node.name if node is not None else NULL_NODE}\n")
