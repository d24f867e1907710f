# -----------------------------------------------------------------------------
#  functions.py
#  Function records and the per-call EvaluationState handed to builtins.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from arbcalc.errors import ErrorKind, MathParserError, SourceRange
from arbcalc.factorization import Factorization
from arbcalc.integer import IntegerValue
from arbcalc.nodes import FunctionNode, Node
from arbcalc.rational import Rational

if TYPE_CHECKING:
    from arbcalc.algorithms import Computation
    from arbcalc.cancellation import CancellationToken
    from arbcalc.context import EvaluationParameters
    from arbcalc.evaluator import Evaluator

Result = Union[Rational, IntegerValue, Factorization]


@dataclass(frozen=True)
class Function:
    names: tuple[str, ...]
    evaluator: Callable[[EvaluationState], Result]
    category: str = "General"
    description: str = ""

    @property
    def name(self) -> str:
        return self.names[0]

    @property
    def aliases(self) -> tuple[str, ...]:
        return self.names[1:]


@dataclass
class EvaluationState:
    """
    Everything a builtin sees for one call: the call node, its unevaluated
    argument nodes, the substitutions in force and the evaluator to recurse
    through. Builtins evaluate their own arguments, which lets `if` skip the
    branch it does not take.
    """
    node: FunctionNode
    substitutions: Mapping[str, Any]
    evaluator: Evaluator

    @property
    def arguments(self) -> list[Node]:
        return self.node.arguments

    @property
    def expression_range(self) -> SourceRange:
        return self.node.range

    @property
    def parameters(self) -> EvaluationParameters:
        return self.evaluator.parameters

    @property
    def token(self) -> CancellationToken:
        return self.evaluator.token

    @property
    def computation(self) -> Computation:
        return self.evaluator.computation

    # ---------- errors --------------------------------------------------------

    def error(self, kind: ErrorKind, range: SourceRange | None = None) -> MathParserError:
        return MathParserError(kind, range or self.expression_range)

    # ---------- arguments -----------------------------------------------------

    def require_count(self, *counts: int) -> None:
        if len(self.arguments) not in counts:
            raise self.error(ErrorKind.INVALID_ARGUMENTS)

    def require_at_least(self, n: int) -> None:
        if len(self.arguments) < n:
            raise self.error(ErrorKind.INVALID_ARGUMENTS)

    def evaluate(self, node: Node) -> Result:
        return self.evaluator.evaluate(node, self.substitutions)

    def numeric(self, node: Node) -> Rational:
        """Evaluate one argument to a Rational; factorizations are not numeric."""
        value = self.evaluate(node)
        if isinstance(value, IntegerValue):
            return value.to_rational()
        if not isinstance(value, Rational):
            raise self.error(ErrorKind.INVALID_ARGUMENTS, node.range)
        return value

    def default_arguments(self) -> list[Rational]:
        return [self.numeric(arg) for arg in self.arguments]

    def integers(self, values: list[Rational], *, positive: bool = False,
                 non_negative: bool = False) -> list[int]:
        """Check the integer (and sign) domain of already-evaluated arguments."""
        if not all(v.is_integer for v in values):
            raise self.error(ErrorKind.ARGUMENT_NOT_INTEGER)
        ints = [v.numerator for v in values]
        if positive and any(n <= 0 for n in ints):
            raise self.error(ErrorKind.ARGUMENT_NOT_POSITIVE)
        if non_negative and any(n < 0 for n in ints):
            raise self.error(ErrorKind.ARGUMENT_NOT_POSITIVE)
        return ints

    def logical(self, value: Rational) -> bool:
        if not value.is_logical:
            raise self.error(ErrorKind.ARGUMENT_NOT_LOGICAL_VALUE)
        return bool(value.numerator)
