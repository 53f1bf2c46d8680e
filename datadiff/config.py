"""Run configuration and the mode resolver that builds it from CLI flags."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .exceptions import UsageError
from .masker import compile_jsonpath
from .models import DiffKind

logger = logging.getLogger(__name__)


class Theme(Enum):
    DEFAULT = "default"
    PRINTER_FRIENDLY = "printer-friendly"


@dataclass(frozen=True)
class CheckMode:
    """Compare two documents afresh."""
    left_path: str
    right_path: str


@dataclass(frozen=True)
class LoadMode:
    """Replay a previously saved session."""
    session_path: str


@dataclass(frozen=True)
class DisplayOutput:
    """Print tables to the terminal."""


@dataclass(frozen=True)
class SaveOutput:
    """Persist the session for later replay."""
    path: str


@dataclass(frozen=True)
class BrowserOutput:
    """Write a standalone HTML document and optionally open it."""
    path: str
    theme: Theme = Theme.DEFAULT
    auto_open: bool = True


Mode = Union[CheckMode, LoadMode]
Output = Union[DisplayOutput, SaveOutput, BrowserOutput]


@dataclass(frozen=True)
class RunConfig:
    """Validated configuration for a single run. Read-only once built."""
    mode: Mode
    requested_kinds: frozenset[DiffKind]
    order_sensitive: bool = False
    output: Output = DisplayOutput()
    excluded_paths: tuple[str, ...] = ()

    @property
    def is_checking(self) -> bool:
        return isinstance(self.mode, CheckMode)


# Flag attribute -> kind it requests
KIND_FLAGS = {
    "key_diffs": DiffKind.KEY,
    "type_diffs": DiffKind.TYPE,
    "value_diffs": DiffKind.VALUE,
    "array_diffs": DiffKind.ARRAY,
}


def resolve(flags: Any) -> RunConfig:
    """
    Validate raw command line flags and build a RunConfig.

    Never touches the filesystem, so configuration errors surface before any
    document or session file is opened.

    Args:
        flags: Parsed arguments (an argparse Namespace or any object with the
            same attributes; missing attributes count as not given)

    Returns:
        The validated RunConfig

    Raises:
        UsageError: If the flags conflict or required ones are missing
    """
    check_files = getattr(flags, "check_files", None)
    read_from = getattr(flags, "read_from", None)

    if check_files and read_from:
        raise UsageError("-c and -r cannot be used together")
    if not check_files and not read_from:
        raise UsageError("either -c LEFT RIGHT or -r SESSION is required")

    requested_kinds = frozenset(
        kind for flag, kind in KIND_FLAGS.items() if getattr(flags, flag, False)
    )

    if check_files:
        if len(check_files) != 2 or not all(check_files):
            raise UsageError("-c needs exactly two file paths")
        if not requested_kinds:
            raise UsageError("select at least one of -k, -t, -v, -a to check")
        mode: Mode = CheckMode(left_path=check_files[0], right_path=check_files[1])
        excluded_paths = _validate_exclusions(getattr(flags, "exclude", None) or ())
    else:
        mode = LoadMode(session_path=read_from)
        excluded_paths = ()
        if getattr(flags, "exclude", None):
            logger.debug("Ignoring exclusions in load mode")

    return RunConfig(
        mode=mode,
        requested_kinds=requested_kinds,
        order_sensitive=bool(getattr(flags, "array_same_order", False)),
        output=_resolve_output(flags),
        excluded_paths=excluded_paths,
    )


def _resolve_output(flags: Any) -> Output:
    write_to = getattr(flags, "write_to", None)
    browser_view = getattr(flags, "browser_view", None)

    if write_to:
        if browser_view:
            logger.debug("-w given, ignoring -b %s", browser_view)
        return SaveOutput(path=write_to)

    if browser_view:
        theme = (Theme.PRINTER_FRIENDLY if getattr(flags, "printer_friendly", False)
                 else Theme.DEFAULT)
        return BrowserOutput(
            path=browser_view,
            theme=theme,
            auto_open=not getattr(flags, "no_browser_show", False),
        )

    return DisplayOutput()


def _validate_exclusions(expressions) -> tuple[str, ...]:
    for expression in expressions:
        try:
            compile_jsonpath(expression)
        except ValueError as e:
            raise UsageError(str(e)) from e
    return tuple(expressions)
