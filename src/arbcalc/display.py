# src/arbcalc/display.py
from __future__ import annotations

import sys

from colorama import Fore, Style

from arbcalc import __version__
from arbcalc.config import list_profiles_with_descriptions, read_current_profile
from arbcalc.errors import EvaluationError
from arbcalc.factorization import Factorization
from arbcalc.fmt import format_duration
from arbcalc.functions import Result
from arbcalc.integer import IntegerValue
from arbcalc.rational import DisplayMode, Rational
from arbcalc.registry import FunctionTable
from arbcalc.runtime import CFG


def format_result(value: Result, mode: DisplayMode | None = None, decimals: int | None = None) -> str:
    """Render a result; approximations get a leading ≈."""
    if isinstance(value, Factorization):
        return value.description()
    if isinstance(value, IntegerValue):
        text = value.description()
    else:
        mode = mode or DisplayMode.parse(CFG("DISPLAY.MODE", "automatic"))
        decimals = int(CFG("EVALUATION.DECIMALS", 20)) if decimals is None else decimals
        text = value.description(mode, decimals)
    if value.approximate and not value.is_nan:
        return f"≈ {text}"
    return text


def print_result(label: str, value: Result, elapsed: float | None = None, *,
                 mode: DisplayMode | None = None, decimals: int | None = None) -> None:
    text = format_result(value, mode, decimals)
    colour = Fore.YELLOW if isinstance(value, Rational) and value.is_nan else Fore.GREEN
    line = f"{Fore.CYAN}{label}{Style.RESET_ALL} = {colour}{text}{Style.RESET_ALL}"
    if elapsed is not None and elapsed >= 0.5:
        line += f"  {Style.DIM}({format_duration(elapsed)}){Style.RESET_ALL}"
    print(line)


def print_evaluation_error(expression: str, error: EvaluationError) -> None:
    """One red line plus the expression with a caret marker under the offending range."""
    print(f"{Fore.RED}Error:{Style.RESET_ALL} {error.description}", file=sys.stderr)
    print(f"  {expression}", file=sys.stderr)
    print(f"  {Fore.RED}{error.highlight(expression)}{Style.RESET_ALL}", file=sys.stderr)


def show_function_list(table: FunctionTable) -> None:
    groups = table.by_category()
    lines: list[str] = []
    for cat in sorted(groups.keys(), key=str.lower):
        lines.append(f"{Fore.CYAN}{cat}:{Style.RESET_ALL}")
        for fn in groups[cat]:
            names = ", ".join(fn.names)
            left = f"  {Fore.GREEN}{names}{Style.RESET_ALL}"
            lines.append(f"{left} — {fn.description}" if fn.description else left)
        lines.append("")

    print(f"{Fore.YELLOW}Available functions: {sum(len(v) for v in groups.values())}{Style.RESET_ALL}")
    print()
    for ln in lines:
        print(ln)


def print_profiles_with_descriptions() -> None:
    pairs = list_profiles_with_descriptions()
    if not pairs:
        print("\nAvailable profiles: (none)")
        return

    current = read_current_profile()
    lines = []
    for name, desc in pairs:
        mark = "🡆" if current and name == current else " "
        lines.append(f"{mark} {name:13} — {desc}")
    print("\nAvailable profiles:\n  " + "\n  ".join(lines))


def show_intro_help() -> None:
    lines = [
        "",
        f"{Fore.GREEN}Arbcalc v{__version__}{Style.RESET_ALL} — exact rational arithmetic",
        f"{'-'*78}",
        "Results stay exact fractions as long as possible; irrational functions",
        "are computed to the configured number of decimals and marked with ≈.",
        "",
        f"{Fore.YELLOW}Expressions:{Style.RESET_ALL}",
        "   1/3 + 1/6      5!      2^100      sqrt(2)      factor(360)      sin(pi/6)",
        "   Operators: + - × ÷ * / % ^ ** ↑↑ ! !! ° √ ∛ & | xor << >> && || == != < >",
        "   Numbers:   1.5e-3  ½  0x1F  0b101  0o17",
        "   History:   $0, $1, ... refer to earlier results, $ans to the last one.",
        "",
        f"{Fore.MAGENTA + Style.BRIGHT}Commands:{Style.RESET_ALL}",
        "   debug on|off|status   switch debug tracing",
        "   f or functions        list all functions by category",
        "   h or help             show this help",
        "   hist                  show the result history",
        "   p                     list profiles",
        "   q or quit             quit",
        "",
        " • Enter a profile name to switch to that profile.",
        " • Press Ctrl-C during an evaluation to cancel it.",
        "",
    ]
    for ln in lines:
        print(ln)
