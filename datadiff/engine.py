"""Main pipeline for datadiff."""

from __future__ import annotations

import logging
import shutil
import sys
import time
from typing import Optional, TextIO

from .classifier import classify
from .config import (
    RunConfig,
    CheckMode,
    LoadMode,
    DisplayOutput,
    SaveOutput,
    BrowserOutput,
)
from .differ import Differ
from .loader import load_document
from .masker import Masker
from .models import Session, SourceLabels
from .renderers import DocumentRenderer, TableRenderer, render
from .viewer import open_document, write_document
from . import store

logger = logging.getLogger(__name__)


class DatadiffEngine:
    """
    Runs one comparison from a validated RunConfig:

    1. Session: compare two documents afresh, or load a saved session
    2. Output: print tables, save the session, or write an HTML document
       and try to open it

    Every error propagates; the caller decides how to report it.
    """

    def __init__(self, differ: Optional[Differ] = None):
        """
        Initialize the engine.

        Args:
            differ: Comparison engine; anything with a compatible `compare`
                method works (uses a default Differ if not provided)
        """
        self.differ = differ or Differ()

    def build_session(self, config: RunConfig) -> Session:
        """Produce the session for this run, fresh or from disk."""
        if isinstance(config.mode, LoadMode):
            return store.load(config.mode.session_path)
        return self._check(config, config.mode)

    def _check(self, config: RunConfig, mode: CheckMode) -> Session:
        start_time = time.time()

        left = load_document(mode.left_path)
        right = load_document(mode.right_path)

        masker = Masker(config.excluded_paths)
        left, right = masker.mask(left, right)

        raw = self.differ.compare(left, right, config.requested_kinds)
        records = classify(raw, config.order_sensitive, config.requested_kinds)

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info("Compared %s and %s: %d differences in %d ms",
                    mode.left_path, mode.right_path, len(records), duration_ms)

        return Session(
            requested_kinds=config.requested_kinds,
            order_sensitive=config.order_sensitive,
            records=records,
            sources=SourceLabels(left=mode.left_path, right=mode.right_path),
            excluded_paths=config.excluded_paths,
        )

    def run(self, config: RunConfig, out: Optional[TextIO] = None) -> int:
        """
        Execute the run.

        Args:
            config: Validated run configuration
            out: Stream for reports (defaults to stdout)

        Returns:
            Process exit code
        """
        out = out or sys.stdout
        session = self.build_session(config)

        # Loaded sessions are filtered by the kinds asked for on this run
        display_kinds = None if config.is_checking else config.requested_kinds
        output = config.output

        if isinstance(output, SaveOutput):
            store.save(session, output.path)
            out.write(f"Saved {len(session.records)} differences to {output.path}\n")
        elif isinstance(output, BrowserOutput):
            document = render(session, DocumentRenderer(output.theme), display_kinds)
            written = write_document(document, output.path)
            out.write(f"Report written to {output.path}\n")
            if output.auto_open:
                open_document(written)
        elif isinstance(output, DisplayOutput):
            color = out.isatty() if hasattr(out, "isatty") else False
            width = shutil.get_terminal_size().columns if color else 120
            out.write(render(session, TableRenderer(color=color, width=width), display_kinds))
        else:
            raise TypeError(f"Unknown output: {type(output).__name__}")

        return 0


def run(config: RunConfig, out: Optional[TextIO] = None) -> int:
    """
    Convenience function to execute a run with the default differ.

    Args:
        config: Validated run configuration
        out: Stream for reports (defaults to stdout)

    Returns:
        Process exit code
    """
    engine = DatadiffEngine()
    return engine.run(config, out)
