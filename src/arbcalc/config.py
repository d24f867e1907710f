from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except ImportError:
    import tomli as toml  # type: ignore

from arbcalc.context import AngleMode
from arbcalc.errors import UserInputError
from arbcalc.rational import DisplayMode
from arbcalc.workspace import ensure_workspace_seeded, workspace_dir

_PROFILE_SECTION = "PROFILE"


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [PROFILE] section).
    .as_dict() feeds runtime.apply().

      - name:        resolved profile name (file stem unless [PROFILE] names it)
      - description: one-line description from [PROFILE] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return _profiles_dir() / f"{name}.toml"


# --- I/O -------------------------------------------------------------------


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except (OSError, toml.TOMLDecodeError) as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None


# --- Metadata & validation ---------------------------------------------------


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [PROFILE] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get(_PROFILE_SECTION) or {}
    data = {k: v for k, v in raw.items() if k != _PROFILE_SECTION}
    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))
    return data, name, description


def _validate(data: dict[str, Any], source: str) -> None:
    """Reject values the evaluator cannot use, naming the offending key."""
    evaluation = data.get("EVALUATION", {}) or {}
    limits = data.get("LIMITS", {}) or {}
    display = data.get("DISPLAY", {}) or {}

    def fail(key: str, value: Any, expected: str) -> None:
        raise UserInputError(f"{source}: {key} = {value!r}, expected {expected}.")

    decimals = evaluation.get("DECIMALS", 20)
    if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
        fail("EVALUATION.DECIMALS", decimals, "a non-negative integer")
    timeout = evaluation.get("TIMEOUT_S", 0)
    if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout < 0:
        fail("EVALUATION.TIMEOUT_S", timeout, "a non-negative number of seconds")
    if not isinstance(evaluation.get("INTEGER_MODE", False), bool):
        fail("EVALUATION.INTEGER_MODE", evaluation.get("INTEGER_MODE"), "true or false")
    try:
        AngleMode.parse(evaluation.get("ANGLE_MODE", "radians"))
        DisplayMode.parse(display.get("MODE", "automatic"))
    except ValueError as e:
        raise UserInputError(f"{source}: {e}") from None
    for key in ("MAX_DIGITS", "GUARD_DIGITS"):
        value = limits.get(key, 1)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            fail(f"LIMITS.{key}", value, "a positive integer")


# --- Public API ------------------------------------------------------------


def list_all_profiles() -> list[str]:
    """
    Return the list of available profile *names* (filename stems).
    """
    ensure_workspace_seeded()
    pdir = _profiles_dir()
    if not pdir.exists():
        return []
    return sorted(p.stem for p in pdir.glob("*.toml"))


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """
    Return [(name, description), ...] for all profiles.
    A profile that fails to parse is listed with its error as description.
    """
    items: list[tuple[str, str]] = []
    for p in _profiles_dir().glob("*.toml"):
        try:
            raw = _load_toml(p)
        except UserInputError as e:
            items.append((p.stem, f"(unreadable: {e})"))
            continue
        _, nm, desc = _split_profile_data(raw, p.stem)
        items.append((nm, desc))
    return sorted(items, key=lambda t: t[0].lower())


def has_profile(name: str) -> bool:
    return _profile_path(name).exists()


def load_settings(name: str | None) -> Settings:
    """
    Load a profile by name (default 'default'), strip the [PROFILE] metadata,
    validate the evaluation keys and return Settings(data=..., name=...,
    description=..., _source=path).
    """
    if not name:
        name = "default"

    path = _profile_path(name)
    if not path.exists():
        raise UserInputError(f"Profile '{name}' not found at {path}")

    raw = _load_toml(path)
    data, resolved_name, description = _split_profile_data(raw, path.stem)
    _validate(data, path.name)

    return Settings(
        data=data,
        name=resolved_name,
        description=description,
        _source=path,
    )


def _current_profile_path() -> Path:
    p = _profiles_dir()
    p.mkdir(parents=True, exist_ok=True)
    return p / ".current"


def read_current_profile() -> str | None:
    try:
        s = _current_profile_path().read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return s[:-5] if s.lower().endswith(".toml") else (s or None)


def write_current_profile(name: str) -> None:
    nm = (name or "").strip()
    if nm.lower().endswith(".toml"):
        nm = nm[:-5]
    _current_profile_path().write_text(nm, encoding="utf-8")
