"""Board listing filters and target selection for ardi."""

from __future__ import annotations

import logging
import re
from typing import Callable

from ardi.toolchain import TargetBoard

logger = logging.getLogger(__name__)

# Lines in `arduino-cli board list` output that never describe a usable board.
_NOISE_MARKERS = ("Unknown", "Board Name", "No boards found")

# vendor:arch:board, optionally followed by :menu=option pairs
_FQBN_RE = re.compile(r"^[\w.-]+:[\w.-]+:[\w.-]+(?::\S+)?$")


class BoardSelectionError(Exception):
    """Base class for board resolution failures."""


class NoBoardsError(BoardSelectionError):
    """Raised when the filtered listing is empty."""

    def __init__(self, message: str = "No boards detected"):
        super().__init__(message)


class InvalidSelectionError(BoardSelectionError):
    """Raised when the user's menu answer does not name a listed board."""

    def __init__(self, message: str = "Invalid board selection"):
        super().__init__(message)


def filter_board_list(raw: str) -> list[str]:
    """Return the device lines of a raw board listing, in order."""
    boards = []
    for line in raw.splitlines():
        logger.debug("Inspecting board", extra={"fields": {"board": line}})
        if not line.strip():
            continue
        if any(marker in line for marker in _NOISE_MARKERS):
            continue
        boards.append(line)
    return boards


def listing_header(raw: str) -> str | None:
    """Return the column header line of a raw listing, if present."""
    for line in raw.splitlines():
        if "Board Name" in line:
            return line
    return None


def format_board_menu(raw: str, boards: list[str]) -> list[str]:
    """Render the filtered boards as numbered menu lines (0-based)."""
    lines = []
    header = listing_header(raw)
    if header:
        lines.append(f"   {header}")
    for i, board in enumerate(boards):
        lines.append(f"{i}: {board}")
    return lines


def parse_target(line: str) -> TargetBoard:
    """Build a TargetBoard from a listing line.

    The device is the first token. The FQBN is the last token, except
    when a trailing Core column follows it; then the last token shaped
    like an FQBN (three or more colon-separated segments) is used.
    """
    tokens = line.split()
    if not tokens:
        raise InvalidSelectionError(f"Cannot parse board line: {line!r}")
    fqbn = tokens[-1]
    for token in reversed(tokens[1:]):
        if _FQBN_RE.match(token):
            fqbn = token
            break
    return TargetBoard(device=tokens[0], fqbn=fqbn)


def select_target(boards: list[str], choose: Callable[[list[str]], object] | None = None) -> TargetBoard:
    """Resolve the filtered listing to a single TargetBoard.

    With one board, it is returned without calling ``choose``. With more,
    ``choose(boards)`` must return the 0-based menu number (an int or a
    string holding one). There is no retry on a bad answer.
    """
    if not boards:
        raise NoBoardsError()
    if len(boards) == 1:
        return parse_target(boards[0])
    if choose is None:
        raise InvalidSelectionError("Multiple boards detected but no selection was made")

    answer = choose(boards)
    try:
        choice = int(str(answer).strip())
    except ValueError:
        raise InvalidSelectionError() from None
    if choice < 0 or choice >= len(boards):
        raise InvalidSelectionError()
    return parse_target(boards[choice])
