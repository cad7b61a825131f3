"""
algebra.py — Solving linear equations for one variable
======================================================
"""

from .environment import Environment
from .errors import DomainError, UnsupportedOperationError
from .evaluator import evaluate
from .functions import default_registry
from .nodes import (
    Add, Divide, Equation, Multiply, Negate, Subtract, Variable, depends_on,
)
from .tokenizer import tokenize


def solve_for_variable(node, right_value, var, env=None):
    """Solve ``node = right_value`` for ``var`` where ``node`` is linear in ``var``.

    Sub-expressions that do not mention ``var`` are evaluated with ``env``.
    """
    env = env if env is not None else Environment()
    totals = {'coefficient': 0.0, 'constant': 0.0}
    _collect_linear(node, var, 1.0, totals, env)
    if totals['coefficient'] == 0:
        raise DomainError(f"Coefficient of variable '{var}' is zero, can't solve")
    return (right_value - totals['constant']) / totals['coefficient']


def _collect_linear(node, var, multiplier, totals, env):
    if isinstance(node, Variable) and node.name == var:
        totals['coefficient'] += multiplier
    elif not depends_on(node, var):
        if isinstance(node, Variable) and node.name not in env:
            raise UnsupportedOperationError(f"Unexpected variable '{node.name}'")
        totals['constant'] += multiplier * evaluate(node, env)
    elif isinstance(node, Add):
        _collect_linear(node.left, var, multiplier, totals, env)
        _collect_linear(node.right, var, multiplier, totals, env)
    elif isinstance(node, Subtract):
        _collect_linear(node.left, var, multiplier, totals, env)
        _collect_linear(node.right, var, -multiplier, totals, env)
    elif isinstance(node, Negate):
        _collect_linear(node.operand, var, -multiplier, totals, env)
    elif isinstance(node, Multiply):
        if not depends_on(node.left, var):
            _collect_linear(node.right, var, multiplier * evaluate(node.left, env), totals, env)
        elif not depends_on(node.right, var):
            _collect_linear(node.left, var, multiplier * evaluate(node.right, env), totals, env)
        else:
            raise UnsupportedOperationError(f"Expression is not linear in '{var}'")
    elif isinstance(node, Divide):
        if depends_on(node.right, var):
            raise UnsupportedOperationError(f"Expression is not linear in '{var}'")
        denominator = evaluate(node.right, env)
        if denominator == 0:
            raise DomainError("Division by zero")
        _collect_linear(node.left, var, multiplier / denominator, totals, env)
    else:
        raise UnsupportedOperationError(
            f"Cannot solve for '{var}' through {type(node).__name__}"
        )


def solve_equation(equation, var, env=None):
    """Solve an Equation node ``left = right`` for ``var`` in the left side."""
    if not isinstance(equation, Equation):
        raise UnsupportedOperationError("solve_equation expects an equation")
    env = env if env is not None else Environment()
    return solve_for_variable(equation.left, evaluate(equation.right, env), var, env)


def extract_variable(text, registry=None):
    """First variable name appearing in ``text``, or None."""
    registry = registry if registry is not None else default_registry()
    for token in tokenize(text, registry):
        if (token[:1].isalpha() and token.isalnum()
                and token not in registry and token not in _NOT_VARIABLES):
            return token
    return None


_NOT_VARIABLES = {'e', 'EULER', 'PI', 'sum', 'NEG', 'ABS_START', 'ABS_END',
                  'begin', 'end', 'cases', 'if', 'otherwise'}
