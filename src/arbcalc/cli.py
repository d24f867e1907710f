# src/arbcalc/cli.py

"""
Arbcalc - exact rational arithmetic calculator

Description:
    Evaluates expressions on exact fractions. Irrational functions (roots,
    logarithms, trigonometry) are computed to a configurable number of
    decimals and marked as approximations.

usage: see arbcalc -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import platform
import sys
import textwrap
import threading
import time
import traceback
from concurrent.futures import Future, ThreadPoolExecutor
from importlib.resources import files as pkg_files
from typing import NamedTuple

from colorama import Fore, Style
from colorama import init as colorama_init

import arbcalc.config as CONFIG
from arbcalc import __version__ as _ver
from arbcalc.context import AngleMode, EvaluationParameters
from arbcalc.display import (
    print_evaluation_error,
    print_profiles_with_descriptions,
    print_result,
    show_function_list,
    show_intro_help,
)
from arbcalc.errors import EvaluationError, UserInputError
from arbcalc.evaluator import Evaluation
from arbcalc.functions import Result
from arbcalc.rational import DisplayMode
from arbcalc.registry import FunctionTable, default_table
from arbcalc.runtime import APPLY, CFG, ensure_runtime_deps
from arbcalc.runtime import current as _rt_current
from arbcalc.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


# In memory session history; entry i is reachable as $i
class HistoryItem(NamedTuple):
    expression: str
    value: Result
    profile: str | None
    timestamp: float


_HISTORY: list[HistoryItem] = []


def add_to_history(expression: str, value: Result, profile: str | None = None) -> int:
    _HISTORY.append(HistoryItem(expression, value, profile, time.time()))
    return len(_HISTORY) - 1


def get_history() -> list[HistoryItem]:
    return list(_HISTORY)


def history_substitutions() -> dict[str, Result]:
    subs: dict[str, Result] = {str(i): item.value for i, item in enumerate(_HISTORY)}
    if _HISTORY:
        subs["ans"] = _HISTORY[-1].value
    return subs


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        sys.stderr.write("\n[UNCAUGHT THREAD EXCEPTION]\n")
        traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
        sys.stderr.flush()
    threading.excepthook = _thread_excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _configure_text_streams() -> None:
    # results use ½, ≈, ×, superscripts: make redirected output UTF-8 safe
    if os.environ.get("PYTHONIOENCODING") or sys.stdout.isatty():
        return
    enc = (sys.stdout.encoding or "").lower()
    if platform.system() == "Windows" or enc in ("", "ascii", "us-ascii"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
        sys.stderr.reconfigure(encoding="utf-8", errors="replace")


def _resolve_inputs(items: list[str]) -> tuple[str | None, str | None]:
    """Return (profile, expression) from the positionals.

    A first item naming an existing profile selects it; everything else is
    joined into the expression ("arbcalc precise 1 / 7").
    """
    if not items:
        return None, None
    if CONFIG.has_profile(items[0]):
        rest = " ".join(items[1:]).strip()
        return items[0], rest or None
    return None, " ".join(items)


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit profile positional
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create the workspace folder and copy the packaged profiles if missing.

      init overwrite
          Meant for developers. Requires environment variable ARBCALC_DEV=1.
          Replaces all profiles in the workspace with the packaged ones.

      functions | list
          List all available functions by category.

      where
          Show the workspace and package paths.

      active
          Show the last used profile.
    """)

    p = argparse.ArgumentParser(
        description="Arbcalc — exact rational arithmetic calculator",
        usage=(
            "arbcalc [profile] [expression] [--decimals N] [--degrees] [--integer] [--mode MODE] [--debug]\n"
            "       arbcalc -h | --help\n"
            "       arbcalc init [overwrite] | functions | where | active\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="[profile] expression",
                   help="optional profile name followed by an expression to evaluate")
    p.add_argument("--decimals", type=int, default=None, help="Decimal places for approximations")
    p.add_argument("--degrees", action="store_true", help="Trigonometric arguments in degrees")
    p.add_argument("--integer", action="store_true", help="Integer mode (truncating division)")
    p.add_argument("--mode", default=None, choices=[m.value for m in DisplayMode],
                   help="Result display mode")
    p.add_argument("--debug", action="store_true", help="Show timings and internal trace info")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = ("--debug" in (argv or sys.argv))
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


class Session:
    """Evaluation settings for one CLI run: profile values with command-line overrides on top."""

    def __init__(self, args: argparse.Namespace, table: FunctionTable):
        self.args = args
        self.table = table
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="arbcalc-eval")

    def parameters(self) -> EvaluationParameters:
        return EvaluationParameters.from_runtime(
            decimals=self.args.decimals,
            angle_mode=AngleMode.DEGREES if self.args.degrees else None,
            integer_mode=True if self.args.integer else None,
        )

    @property
    def display_mode(self) -> DisplayMode:
        return DisplayMode.parse(self.args.mode or CFG("DISPLAY.MODE", "automatic"))

    def run(self, expression: str, profile: str | None) -> Result | EvaluationError:
        """Evaluate on the worker thread; Ctrl-C cancels through the evaluation's token."""
        parameters = self.parameters()
        evaluation = Evaluation(expression, history_substitutions(), parameters, self.table)
        future: Future = evaluation.submit(self.executor)
        try:
            outcome = future.result()
        except KeyboardInterrupt:
            evaluation.cancel()
            print(f"{Fore.YELLOW}Cancelled.{Style.RESET_ALL}", file=sys.stderr)
            outcome = future.result()

        if isinstance(outcome, EvaluationError):
            print_evaluation_error(expression, outcome)
            return outcome
        index = add_to_history(expression, outcome, profile)
        print_result(f"${index}", outcome, evaluation.elapsed,
                     mode=self.display_mode, decimals=parameters.decimals)
        return outcome

    def close(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)
    _configure_text_streams()

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if args.decimals is not None and args.decimals < 0:
        parser.error("--decimals must be a non-negative integer")

    if not ensure_runtime_deps(strict=True):
        return 1

    # first-run workspace seed
    ensure_workspace_seeded()

    items = list(args.items)
    command = items[0].lower() if items else None

    if command == "active":
        print(f"Active profile: {CONFIG.read_current_profile() or 'default'}")
        return 0
    if command == "init":
        if len(items) == 2 and items[1] == "overwrite":
            if os.environ.get("ARBCALC_DEV") != "1":
                print("Refusing to overwrite: set ARBCALC_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0
    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('arbcalc')}")
        return 0

    table = default_table()
    if command in ("functions", "list"):
        show_function_list(table)
        return 0

    profile, expression = _resolve_inputs(items)
    profile_name = _select_profile_name(profile)
    if not CONFIG.has_profile(profile_name):
        if profile:
            print(f"Unknown profile: '{profile}'")
            print("Available profiles:", ", ".join(CONFIG.list_all_profiles()))
            return 2
        profile_name = "default"

    if CONFIG.has_profile(profile_name):
        selected = CONFIG.load_settings(profile_name)
        APPLY(selected)
        if args.debug:
            rt.debug = True
            print(f"[debug] active profile: {profile_name}", file=sys.stderr)
            print(f"[debug] profile file: {selected._source}", file=sys.stderr)
            print(f"[debug] builtins: {len(table)} names", file=sys.stderr)

    session = Session(args, table)
    try:
        # --- one-shot expression path ---
        if expression is not None:
            outcome = session.run(expression, profile_name)
            return 2 if isinstance(outcome, EvaluationError) else 0
        return _repl(session, profile_name)
    finally:
        session.close()


# ---- REPL ----
def _repl(session: Session, current_profile: str) -> int:
    print(f"{Fore.YELLOW}{Style.BRIGHT}Arbcalc v{_ver} — exact rational arithmetic{Style.RESET_ALL}")

    while True:
        try:
            prompt = f"\nProfile: {current_profile} — expression, command or profile (h=Help, q=Quit): "
            user_input = input(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        low = user_input.lower()
        if low in {"", "q", "quit"}:
            break

        if low in {"h", "help"}:
            show_intro_help()
            continue

        if low in {"f", "functions"}:
            show_function_list(session.table)
            continue

        if low in {"p", "list profiles"}:
            print_profiles_with_descriptions()
            continue

        if low in {"hist", "history"}:
            hist = get_history()
            if not hist:
                print("History is empty.")
                continue
            for i, item in enumerate(hist):
                ts = time.strftime("%H:%M:%S", time.localtime(item.timestamp))
                print(f"{ts}  ${i:<4} {item.expression:<30} profile={item.profile or '-'}")
            continue

        if low.startswith("debug"):
            parts = low.split()
            rt = _rt_current()
            if len(parts) == 1 or parts[1] == "status":
                print(f"Debug is currently {'ON' if rt.debug else 'OFF'}.")
            elif parts[1] == "on":
                rt.debug = True
                print("Debug mode enabled for this session.")
            elif parts[1] == "off":
                rt.debug = False
                print("Debug mode disabled for this session.")
            else:
                print("Usage: DEBUG [on|off|status]")
            continue

        # profile switch
        if CONFIG.has_profile(user_input):
            try:
                selected = CONFIG.load_settings(user_input)
            except UserInputError as e:
                _print_user_error(str(e))
                continue
            APPLY(selected)
            CONFIG.write_current_profile(user_input)
            current_profile = user_input
            print(f"Applied profile: {current_profile}")
            continue

        try:
            session.run(user_input, current_profile)
        except Exception as e:
            if _rt_current().debug:
                traceback.print_exc()
            else:
                _print_user_error(f"{e.__class__.__name__}: {e}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
