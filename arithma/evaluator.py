"""
evaluator.py — Numeric evaluation of expression trees
=====================================================
"""

import logging
import math

from .environment import Environment
from .errors import DomainError, EvaluationError, UndefinedVariableError
from .functions import default_registry
from .nodes import (
    Abs, Add, Divide, Equal, Equation, Function, Greater, GreaterEqual,
    Less, LessEqual, Multiply, Negate, Number, Piecewise, Power, Rational,
    Sqrt, Subtract, Summation, Variable,
)

logger = logging.getLogger(__name__)


def _power(base, exponent):
    try:
        return math.pow(base, exponent)
    except ValueError:
        # negative base with a fractional exponent, or 0 to a negative power
        return math.nan
    except OverflowError:
        return math.inf


def _divide(left, right):
    return math.nan if right == 0 else left / right


_ARITHMETIC = {
    Add: lambda a, b: a + b,
    Subtract: lambda a, b: a - b,
    Multiply: lambda a, b: a * b,
    Divide: _divide,
    Power: _power,
}

_COMPARISONS = {
    Greater: lambda a, b: a > b,
    Less: lambda a, b: a < b,
    GreaterEqual: lambda a, b: a >= b,
    LessEqual: lambda a, b: a <= b,
    Equal: lambda a, b: a == b,
}


class Evaluator:
    """Reduces a Node to a float under one Environment."""

    def __init__(self, env=None, registry=None):
        self.env = env if env is not None else Environment()
        self.registry = registry if registry is not None else default_registry()

    def eval(self, node):
        kind = type(node)

        if kind is Number:
            return float(node.value)
        if kind is Rational:
            if node.denominator == 0:
                return math.nan
            return node.numerator / node.denominator
        if kind is Variable:
            value = self.env.get(node.name)
            if value is None:
                raise UndefinedVariableError(node.name)
            return value

        if kind in _ARITHMETIC:
            return _ARITHMETIC[kind](self.eval(node.left), self.eval(node.right))
        if kind in _COMPARISONS:
            return 1.0 if _COMPARISONS[kind](self.eval(node.left), self.eval(node.right)) else 0.0

        if kind is Negate:
            return -self.eval(node.operand)
        if kind is Abs:
            return abs(self.eval(node.operand))
        if kind is Sqrt:
            value = self.eval(node.operand)
            if value < 0:
                raise DomainError(f"Square root of negative number {value}")
            return math.sqrt(value)

        if kind is Function:
            args = [self.eval(arg) for arg in node.args]
            return self.registry.call(node.name, args)
        if kind is Piecewise:
            return self._piecewise(node)
        if kind is Summation:
            return self._summation(node)
        if kind is Equation:
            raise EvaluationError("An equation has no numeric value; evaluate one side instead")

        raise EvaluationError(f"Cannot evaluate {kind.__name__}")

    def _piecewise(self, node):
        for expr, guard in node.branches:
            if self.eval(guard) == 1.0:
                return self.eval(expr)
        raise EvaluationError("No piecewise branch condition is satisfied")

    def _summation(self, node):
        start = self.eval(node.start)
        end = self.eval(node.end)
        if not (float(start).is_integer() and float(end).is_integer()):
            raise DomainError(f"Summation bounds must be integers, got {start} and {end}")
        inner = Evaluator(self.env.copy(), self.registry)
        total = 0.0
        for i in range(int(start), int(end) + 1):
            inner.env.set(node.index, i)
            total += inner.eval(node.body)
        logger.debug("summation over %s=%d..%d -> %s", node.index, start, end, total)
        return total


def evaluate(node, env=None, registry=None):
    """Evaluate ``node`` with the bindings in ``env``."""
    return Evaluator(env, registry).eval(node)
