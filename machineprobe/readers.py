"""
Source Readers

Line-oriented text extraction shared by every probe. Pseudo-files, command
output and release files all go through ``find`` so that the matching rules
(first match wins, first line wins when no keys are given) are identical
everywhere.
"""

import io
import os
import logging
import subprocess
from typing import Dict, Iterable, Optional, Sequence, Tuple, Union

logger = logging.getLogger("machineprobe.readers")

# Seconds to wait for an external command before giving up
COMMAND_TIMEOUT = 3.0

PathLike = Union[str, "os.PathLike[str]"]


def find(lines: Iterable[str], keys: Optional[Sequence[str]] = None) -> Tuple[str, bool]:
    """
    Scan lines for the first ``key: value`` entry whose key is in ``keys``.

    Args:
        lines: Any iterable of text lines (file object, StringIO, list)
        keys: Candidate keys. Exact, case-sensitive match against the text
            before the first colon. When empty or None the first line is
            the value.

    Returns:
        Tuple of (value, found). ``("", False)`` when nothing matched.
    """
    candidates = frozenset(keys) if keys else None

    for line in lines:
        if line is None:
            continue

        if candidates is None:
            return line.strip(), True

        p = line.find(":")
        if p > 0 and line[:p].strip() in candidates:
            return line[p + 1:].strip(), True

    return "", False


def read_keyed(path: PathLike, keys: Optional[Sequence[str]] = None) -> Tuple[str, bool]:
    """
    Run ``find`` over a file.

    A missing path is an expected condition on the other platform family
    and simply returns ``("", False)``.
    """
    if not os.path.exists(path):
        return "", False

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return find(f, keys)
    except OSError as e:
        logger.debug(f"Failed to read {path}: {e}")
        return "", False


def find_in_text(text: Optional[str], keys: Optional[Sequence[str]] = None) -> Tuple[str, bool]:
    """Run ``find`` over an in-memory block of text such as command output."""
    if not text:
        return "", False

    with io.StringIO(text) as reader:
        return find(reader, keys)


def read_text(path: PathLike) -> str:
    """Return the whole content of a file, or an empty string if unreadable."""
    if not os.path.exists(path):
        return ""

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        logger.debug(f"Failed to read {path}: {e}")
        return ""


def split_as_dict(
    text: Optional[str],
    separator: str = "=",
    delimiter: str = "\n",
    trim_quotes: bool = True,
) -> Dict[str, str]:
    """
    Parse ``key=value`` pairs, one pair per ``delimiter``-separated chunk.

    Each chunk is split on the first ``separator``. Keys and values are
    whitespace-trimmed; with ``trim_quotes`` surrounding quotes are removed
    from values as well. Chunks without a separator are ignored and later
    duplicates overwrite earlier ones.
    """
    result: Dict[str, str] = {}
    if not text:
        return result

    for chunk in text.split(delimiter):
        p = chunk.find(separator)
        if p <= 0:
            continue

        key = chunk[:p].strip()
        value = chunk[p + len(separator):].strip()
        if trim_quotes:
            value = value.strip("\"'").strip()
        if key:
            result[key] = value

    return result


def execute(
    command: str,
    arguments: Optional[Sequence[str]] = None,
    timeout: float = COMMAND_TIMEOUT,
) -> str:
    """
    Run an external command and return its standard output.

    Output is decoded as UTF-8 with undecodable bytes replaced, since
    firmware strings in dmidecode dumps are not always valid text.
    Waits at most ``timeout`` seconds. A timeout, a missing executable, an
    OS error or a non-zero exit status all give an empty string; nothing is
    raised to the caller and nothing is retried.

    Args:
        command: Executable name or path
        arguments: Optional argument list
        timeout: Seconds to wait for the process

    Returns:
        Captured stdout as text, or "" on failure
    """
    args = [command] + list(arguments or [])

    try:
        result = subprocess.run(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.debug(f"Command timed out after {timeout}s: {command}")
        return ""
    except OSError as e:
        logger.debug(f"Command failed to start: {command}: {e}")
        return ""

    if result.returncode != 0:
        logger.debug(f"Command exited with {result.returncode}: {command}")
        return ""

    return result.stdout or ""
