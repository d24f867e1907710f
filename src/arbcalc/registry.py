# src/arbcalc/registry.py
from __future__ import annotations

import inspect
from collections import OrderedDict
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import import_module
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path
from types import MappingProxyType

from arbcalc.functions import EvaluationState, Function, Result
from arbcalc.runtime import debug

BUILTINS_PACKAGE = "arbcalc.builtins"


# --------------------- Discovery → FunctionTable (immutable) ----------------------


@dataclass(frozen=True)
class FunctionTable:
    functions: Mapping[str, Function]                               # name/alias -> Function
    sources: Mapping[str, tuple[str, ...]] = field(default_factory=dict)        # module -> primary names
    duplicates: tuple[tuple[str, str, str], ...] = ()               # (alias, skipped module, kept module)

    def get(self, name: str) -> Function | None:
        return self.functions.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def __len__(self) -> int:
        return len(self.functions)

    def unique(self) -> Iterator[Function]:
        """Each Function once, in registration order."""
        seen: set[int] = set()
        for fn in self.functions.values():
            if id(fn) not in seen:
                seen.add(id(fn))
                yield fn

    def by_category(self) -> dict[str, list[Function]]:
        out: dict[str, list[Function]] = {}
        for fn in self.unique():
            out.setdefault(fn.category, []).append(fn)
        return out


def _is_builtin(obj) -> bool:
    return callable(obj) and getattr(obj, "__is_builtin__", False)


def _collect_from_module(mod) -> list[Callable[[EvaluationState], Result]]:
    # source order, so aliases resolve the same way on every run
    found = [o for _, o in inspect.getmembers(mod) if _is_builtin(o)]
    found.sort(key=lambda fn: fn.__code__.co_firstlineno)
    return found


# ---------- Decorator (only tags the function; no side effects) ----------


def builtin(*names: str, category: str, description: str = ""):
    """Mark a function as a builtin callable under `names` (first is primary, rest are aliases)."""
    if not names:
        raise ValueError("a builtin needs at least one name")

    def deco(fn: Callable[[EvaluationState], Result]):
        fn.__is_builtin__ = True
        fn.names = tuple(names)
        fn.category = category
        fn.description = description
        return fn
    return deco


def _builtin_module_names() -> list[str]:
    pkg_dir = pkg_files(BUILTINS_PACKAGE)
    with as_file(pkg_dir) as real:
        return [f"{BUILTINS_PACKAGE}.{file.stem}"
                for file in sorted(Path(real).glob("*.py"))
                if file.name != "__init__.py"]


def discover() -> FunctionTable:
    """Import every module of arbcalc.builtins and index its @builtin functions; first registration of a name wins."""
    functions: OrderedDict[str, Function] = OrderedDict()
    owners: dict[str, str] = {}
    sources: dict[str, tuple[str, ...]] = {}
    duplicates: list[tuple[str, str, str]] = []

    for modname in _builtin_module_names():
        mod = import_module(modname)
        primaries = []
        for fn in _collect_from_module(mod):
            record = Function(names=fn.names, evaluator=fn, category=fn.category, description=fn.description)
            for name in record.names:
                if name in functions:
                    duplicates.append((name, modname, owners[name]))
                    continue
                functions[name] = record
                owners[name] = modname
            primaries.append(record.name)
        sources[modname] = tuple(primaries)
        debug("registry", f"{modname}: {len(primaries)} builtin(s)")

    for name, skipped, kept in duplicates:
        debug("registry", f"duplicate name {name!r} in {skipped}; keeping {kept}")

    return FunctionTable(
        functions=MappingProxyType(dict(functions)),
        sources=MappingProxyType(sources),
        duplicates=tuple(duplicates),
    )


@lru_cache(maxsize=1)
def default_table() -> FunctionTable:
    """The process-wide table, built on first use."""
    return discover()
