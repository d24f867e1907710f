# runtime.py
from __future__ import annotations

import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import Any

from colorama import Fore, Style

# Python refuses str() on ints above this many digits unless raised
_MIN_STR_DIGITS = 4300


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False  # controls verbosity / tracebacks

    def apply(self, settings: Any) -> None:
        self.profile_name = (
            getattr(settings, "name", None)
            or getattr(settings, "_source", None)
            or "default"
        )

        if hasattr(settings, "as_dict") and callable(settings.as_dict):
            cfg = settings.as_dict()
        elif isinstance(settings, dict):
            cfg = settings
        else:
            # grab UPPERCASE attributes from simple objects / modules
            cfg = {k: getattr(settings, k) for k in dir(settings) if k.isupper()}
        self.settings = dict(cfg)

        dbg = self.get("BEHAVIOUR.DEBUG", None)
        if isinstance(dbg, bool):
            self.debug = dbg

        sync_int_str_limit(self.get("LIMITS.MAX_DIGITS", None))

    def get(self, key: str, default: Any = None) -> Any:
        """Support dotted lookups, e.g., 'EVALUATION.DECIMALS'."""
        if not key:
            return default
        cur = self.settings
        if "." in key:
            for part in key.split("."):
                if isinstance(cur, dict) and part in cur:
                    cur = cur[part]
                else:
                    return default
            return cur
        return cur.get(key, default)


# --- Context management ---

_current_runtime: ContextVar[Runtime | None] = ContextVar("arbcalc_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = Runtime()
        _current_runtime.set(rt)
    return rt


def APPLY(settings: Any) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


def debug(tag: str, msg: str) -> None:
    """Print a `[tag] msg` trace line to stderr when the runtime debug flag is on."""
    if current().debug:
        print(f"[{tag}] {msg}", file=sys.stderr)


def sync_int_str_limit(max_digits: Any) -> None:
    """Let str() render integers up to the configured digit limit. Only ever raises the limit."""
    if not isinstance(max_digits, int) or not hasattr(sys, "set_int_max_str_digits"):
        return
    limit = sys.get_int_max_str_digits()
    if limit == 0:  # unlimited
        return
    wanted = max(_MIN_STR_DIGITS, max_digits + 1)
    if wanted > limit:
        sys.set_int_max_str_digits(wanted)


# ---- Dependency check --------------------------------------------------------

def ensure_runtime_deps(strict: bool = True) -> bool:
    """
    Verify core runtime deps are available. Uses find_spec() so nothing is
    imported here. If strict=True, prints a friendly error and returns False
    when one is missing.
    """
    required = ("sympy", "gmpy2")
    missing = [name for name in required if find_spec(name) is None]

    if not missing:
        return True

    msg = (
        f"{Fore.RED}{Style.BRIGHT}\nMissing dependencies:{Style.RESET_ALL} "
        + ", ".join(missing)
        + "\nInstall with: "
        + f"{Fore.YELLOW}pip install " + " ".join(missing) + f"{Style.RESET_ALL}"
    )
    print(msg)
    return not strict
