# -----------------------------------------------------------------------------
#  evaluator.py
#  Tree-walking evaluator plus the Evaluation façade (one expression, one
#  token, one result or error).
# -----------------------------------------------------------------------------

from __future__ import annotations

import contextvars
import threading
from collections.abc import Mapping
from concurrent.futures import Executor, Future
from enum import Enum
from time import perf_counter
from typing import Any

from arbcalc.algorithms import Computation
from arbcalc.cancellation import CancellationToken, ensure_token
from arbcalc.context import EvaluationParameters
from arbcalc.errors import ErrorKind, EvaluationError, MathParserError, SourceRange
from arbcalc.factorization import Factorization
from arbcalc.fmt import format_duration
from arbcalc.functions import EvaluationState, Result
from arbcalc.integer import IntegerValue
from arbcalc.nodes import FunctionNode, Node, NumberNode, VariableNode
from arbcalc.parser import parse
from arbcalc.rational import Rational
from arbcalc.registry import FunctionTable, default_table
from arbcalc.runtime import CFG, current, debug, sync_int_str_limit


class Evaluator:
    """
    Walks an AST. Function calls are dispatched through the FunctionTable;
    variables are looked up in the substitution mapping, whose values may be
    results, plain ints, or expression strings that are evaluated on demand.
    """

    def __init__(self, table: FunctionTable | None = None,
                 parameters: EvaluationParameters | None = None,
                 token: CancellationToken | None = None):
        self.table = table if table is not None else default_table()
        self.parameters = parameters if parameters is not None else EvaluationParameters.from_runtime()
        sync_int_str_limit(self.parameters.max_digits)
        self.token = ensure_token(token)
        self.computation = Computation(self.parameters, self.token)
        self._expanding: list[str] = []
        self._expanded: dict[str, Result] = {}

    def evaluate(self, node: Node, substitutions: Mapping[str, Any] | None = None) -> Result:
        substitutions = substitutions if substitutions is not None else {}
        if self.token.is_cancel_requested():
            return Rational.nan()

        if isinstance(node, NumberNode):
            return node.value
        if isinstance(node, VariableNode):
            return self._substitute(node.name, node.range, substitutions)
        if isinstance(node, FunctionNode):
            return self._call(node, substitutions)
        raise MathParserError(ErrorKind.INTERNAL_ERROR, node.range)

    def _call(self, node: FunctionNode, substitutions: Mapping[str, Any]) -> Result:
        fn = self.table.get(node.name)
        if node.bare:
            # bare identifier: constant/zero-argument function, then substitution
            if fn is None:
                if node.name in substitutions:
                    return self._substitute(node.name, node.range, substitutions)
                raise MathParserError(ErrorKind.UNKNOWN_VARIABLE, node.range, node.name)
        elif fn is None:
            raise MathParserError(ErrorKind.UNKNOWN_FUNCTION, node.name_range, node.name)
        state = EvaluationState(node=node, substitutions=substitutions, evaluator=self)
        return fn.evaluator(state)

    def _substitute(self, name: str, range: SourceRange, substitutions: Mapping[str, Any]) -> Result:
        if name not in substitutions:
            raise MathParserError(ErrorKind.UNKNOWN_VARIABLE, range, name)
        value = substitutions[name]
        if isinstance(value, (Rational, IntegerValue, Factorization)):
            return value
        if isinstance(value, bool):
            return Rational.boolean(value)
        if isinstance(value, int):
            return Rational(value)
        if isinstance(value, str):
            return self._expand(name, value, range, substitutions)
        raise MathParserError(ErrorKind.INVALID_ARGUMENTS, range, name)

    def _expand(self, name: str, text: str, range: SourceRange, substitutions: Mapping[str, Any]) -> Result:
        """Evaluate a string substitution once per evaluation, refusing cycles."""
        if name in self._expanded:
            return self._expanded[name]
        if name in self._expanding:
            raise MathParserError(ErrorKind.RECURSIVE_SUBSTITUTION, range, name)
        self._expanding.append(name)
        try:
            node = parse(text)
        except MathParserError as err:
            # report against the variable in the outer expression
            raise MathParserError(err.kind, range, err.detail) from err
        try:
            value = self.evaluate(node, substitutions)
        finally:
            self._expanding.pop()
        self._expanded[name] = value
        return value


class EvaluationStatus(Enum):
    CREATED = "created"
    EVALUATING = "evaluating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Evaluation:
    """
    One expression evaluated once.

    Lifecycle CREATED -> EVALUATING -> SUCCEEDED | FAILED. The outcome is a
    Result (`result`) or an EvaluationError (`error`); parse and evaluation
    errors never escape `evaluate()`. Cancellation (through `cancel()`, the
    token, or the optional timeout) surfaces as a NaN result.
    """

    def __init__(self, expression: str, substitutions: Mapping[str, Any] | None = None,
                 parameters: EvaluationParameters | None = None,
                 table: FunctionTable | None = None,
                 token: CancellationToken | None = None,
                 timeout: float | None = None):
        self.expression = expression
        self.substitutions = dict(substitutions or {})
        self.parameters = parameters if parameters is not None else EvaluationParameters.from_runtime()
        sync_int_str_limit(self.parameters.max_digits)
        self.table = table
        self.token = ensure_token(token)
        self.timeout = float(CFG("EVALUATION.TIMEOUT_S", 0) or 0) if timeout is None else float(timeout)
        self.status = EvaluationStatus.CREATED
        self.result: Result | None = None
        self.error: EvaluationError | None = None
        self.elapsed: float = 0.0
        self._lock = threading.Lock()

    @property
    def is_finished(self) -> bool:
        return self.status in (EvaluationStatus.SUCCEEDED, EvaluationStatus.FAILED)

    def cancel(self) -> None:
        self.token.request_cancel()

    def submit(self, executor: Executor) -> Future:
        """Run `evaluate()` on `executor`; the future resolves to a Result or an EvaluationError."""
        # carry the active runtime (profile, debug flag) into the worker thread
        ctx = contextvars.copy_context()
        return executor.submit(ctx.run, self.evaluate)

    def evaluate(self) -> Result | EvaluationError:
        with self._lock:
            if self.status is not EvaluationStatus.CREATED:
                raise RuntimeError(f"evaluation already {self.status.value}")
            self.status = EvaluationStatus.EVALUATING

        timer = self._arm_timer()
        t0 = perf_counter()
        try:
            node = parse(self.expression)
            evaluator = Evaluator(self.table, self.parameters, self.token)
            value = self._finalize(evaluator.evaluate(node, self.substitutions))
        except MathParserError as exc:
            if not self.token.is_cancel_requested():
                return self._fail(EvaluationError.from_exception(exc), t0)
            # a cancelled argument came back as NaN and was rejected by its caller
            value = self._finalize(Rational.nan())
        except RecursionError:
            return self._fail(EvaluationError(ErrorKind.INTERNAL_ERROR, ErrorKind.INTERNAL_ERROR.value,
                                              (0, len(self.expression))), t0)
        finally:
            if timer is not None:
                timer.cancel()

        self.elapsed = perf_counter() - t0
        self.result = value
        self.status = EvaluationStatus.SUCCEEDED
        if current().debug:
            debug("eval", f"{self.expression!r} -> {value.description()} in {format_duration(self.elapsed)}")
        return value

    def _fail(self, error: EvaluationError, t0: float) -> EvaluationError:
        self.elapsed = perf_counter() - t0
        self.error = error
        self.status = EvaluationStatus.FAILED
        debug("eval", f"{self.expression!r} failed: {error.description} at {error.source_range}")
        return error

    def _finalize(self, value: Result) -> Result:
        if self.parameters.integer_mode and isinstance(value, Rational):
            return IntegerValue.from_rational(value)
        return value

    def _arm_timer(self) -> threading.Timer | None:
        if self.timeout <= 0:
            return None
        timer = threading.Timer(self.timeout, self.token.request_cancel)
        timer.daemon = True
        timer.start()
        return timer


def evaluate(expression: str, substitutions: Mapping[str, Any] | None = None,
             parameters: EvaluationParameters | None = None,
             token: CancellationToken | None = None) -> Result | EvaluationError:
    """Evaluate `expression` in one call; see Evaluation."""
    return Evaluation(expression, substitutions, parameters, token=token).evaluate()
