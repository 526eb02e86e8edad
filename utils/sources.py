"""
Input Source and Output Sink Utilities

Loads the JSON record collections a run consumes and writes the artifacts it
produces. Any problem reading a source or writing a sink is raised as a
`TopUpError` subclass; the run orchestrator is the only place that catches them.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Iterable

import orjson

from utils.schemas import RejectedRecord

logger = logging.getLogger(__name__)


class TopUpError(Exception):
    """Base class for run-level failures."""


class SourceUnavailable(TopUpError):
    """An input source is missing, unreadable or malformed."""

    def __init__(self, kind: str, path: str, reason: str) -> None:
        self.kind = kind
        self.path = path
        self.reason = reason
        super().__init__(f"{kind.capitalize()} source unavailable: {path} - {reason}")


class SinkFailure(TopUpError):
    """An output artifact could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write output: {path} - {reason}")


def parse_records(content: bytes | str, kind: str, origin: str = "<memory>") -> list[Any]:
    """
    Parse a JSON document that must hold an array of records.

    Args:
        content: Raw JSON text
        kind: Descriptive name for error messages ('users', 'companies')
        origin: Where the content came from, for error messages

    Returns:
        The parsed list; items are left untyped for the validator

    Raises:
        SourceUnavailable: If the content is not valid JSON or not an array
    """
    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError as e:
        logger.error("Invalid JSON in %s source: %s - %s", kind, origin, e)
        raise SourceUnavailable(kind, origin, f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        logger.error("Expected a JSON array in %s source: %s", kind, origin)
        raise SourceUnavailable(kind, origin, f"expected a JSON array, got {type(data).__name__}")

    return data


def load_records(path: str, kind: str) -> list[Any]:
    """
    Load a JSON array of records from a file.

    Args:
        path: Path to the JSON file
        kind: Descriptive name for error messages ('users', 'companies')

    Returns:
        The parsed list of raw records

    Raises:
        SourceUnavailable: If the file is missing, unreadable or malformed
    """
    json_path = Path(path)

    if not json_path.exists():
        logger.error("%s file not found: %s", kind.capitalize(), path)
        raise SourceUnavailable(kind, path, "file not found")

    if not json_path.is_file():
        logger.error("%s path is not a file: %s", kind.capitalize(), path)
        raise SourceUnavailable(kind, path, "not a file")

    try:
        content = json_path.read_bytes()
    except OSError as e:
        logger.error("Error reading %s file: %s - %s", kind, path, e)
        raise SourceUnavailable(kind, path, str(e)) from e

    records = parse_records(content, kind, origin=path)
    logger.debug("Loaded %s source: path=%s, records=%d", kind, path, len(records))
    return records


def _target_mode(target: Path) -> int:
    """Mode for the written file: keep an existing file's, else follow the umask."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _atomic_write(path: str, data: bytes) -> None:
    """Write bytes to a sibling temp file, then rename it over the target.

    The target's directory must already exist.
    """
    target = Path(path)
    mode = _target_mode(target)

    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_report(path: str, text: str) -> None:
    """
    Write the rendered report in one piece.

    Args:
        path: Destination file path
        text: Full report text

    Raises:
        SinkFailure: If the file cannot be written
    """
    try:
        _atomic_write(path, text.encode("utf-8"))
    except OSError as e:
        logger.error("Error writing output file: %s - %s", path, e)
        raise SinkFailure(path, str(e)) from e

    logger.debug("Report written: path=%s, bytes=%d", path, len(text))


def write_rejects(path: str, rejects: Iterable[RejectedRecord]) -> int:
    """
    Write rejected records as JSON Lines, one dead-letter entry per line.

    Args:
        path: Destination file path
        rejects: Rejected records to persist

    Returns:
        Number of lines written

    Raises:
        SinkFailure: If the file cannot be written
    """
    lines = [orjson.dumps(reject.model_dump(mode="json")) + b"\n" for reject in rejects]

    try:
        _atomic_write(path, b"".join(lines))
    except OSError as e:
        logger.error("Error writing rejects file: %s - %s", path, e)
        raise SinkFailure(path, str(e)) from e

    logger.info("Rejects file written: %s (records=%d)", path, len(lines))
    return len(lines)
