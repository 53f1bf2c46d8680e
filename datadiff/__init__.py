"""
datadiff - Structural differences between JSON and YAML documents

Compares two documents, classifies what differs (keys, types, values and
array elements), and reports the result as terminal tables, a standalone
HTML page, or a saved session that can be replayed later.
"""

from .engine import DatadiffEngine, run
from .models import (
    DiffKind,
    Side,
    SourceLabels,
    KeyDiff,
    TypeDiff,
    ValueDiff,
    ArrayDiff,
    Session,
    RawDiffSet,
)
from .config import (
    RunConfig,
    CheckMode,
    LoadMode,
    DisplayOutput,
    SaveOutput,
    BrowserOutput,
    Theme,
    resolve,
)
from .differ import Differ
from .classifier import classify
from .renderers import TableRenderer, DocumentRenderer, render
from .exceptions import (
    DatadiffError,
    UsageError,
    DocumentParseError,
    FileAccessError,
    SchemaError,
)

__version__ = "1.0.0"
__all__ = [
    # Engine
    "DatadiffEngine",
    "run",
    "Differ",
    "classify",
    # Records
    "DiffKind",
    "Side",
    "SourceLabels",
    "KeyDiff",
    "TypeDiff",
    "ValueDiff",
    "ArrayDiff",
    "Session",
    "RawDiffSet",
    # Configuration
    "RunConfig",
    "CheckMode",
    "LoadMode",
    "DisplayOutput",
    "SaveOutput",
    "BrowserOutput",
    "Theme",
    "resolve",
    # Rendering
    "TableRenderer",
    "DocumentRenderer",
    "render",
    # Errors
    "DatadiffError",
    "UsageError",
    "DocumentParseError",
    "FileAccessError",
    "SchemaError",
]
