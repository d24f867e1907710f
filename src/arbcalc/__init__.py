from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("arbcalc")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .cancellation import CancellationToken
from .config import has_profile, load_settings, read_current_profile
from .context import AngleMode, EvaluationParameters
from .errors import ErrorKind, EvaluationError, MathParserError
from .evaluator import Evaluation, evaluate
from .factorization import Factorization
from .integer import IntegerValue
from .rational import Rational
from .registry import default_table, discover
from .runtime import APPLY, CFG
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "AngleMode",
    "CancellationToken",
    "ErrorKind",
    "Evaluation",
    "EvaluationError",
    "EvaluationParameters",
    "Factorization",
    "IntegerValue",
    "MathParserError",
    "Rational",
    "__version__",
    "default_table",
    "discover",
    "evaluate",
    "has_profile",
    "load_settings",
    "read_current_profile",
    "workspace_dir"
]
