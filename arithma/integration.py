"""
integration.py — Antiderivatives and definite integrals
=======================================================
Covers constants, linearity, the power rule (with x^-1 → ln|x|) and constant
factors.  Anything else raises UnsupportedOperationError.  The constant of
integration is left to the caller's rendering.
"""

import logging

from .environment import Environment
from .errors import UnsupportedOperationError
from .evaluator import evaluate
from .nodes import (
    Abs, Add, Divide, Function, Multiply, Negate, Number, Power, Rational,
    Subtract, Variable, depends_on, is_numeric_literal, literal_value,
)

logger = logging.getLogger(__name__)


def _log_abs(var):
    return Function('ln', [Abs(Variable(var))])


def integrate(node, var):
    """Antiderivative of ``node`` with respect to ``var``."""
    x = Variable(var)

    if isinstance(node, Number):
        return Number(0.0) if node.value == 0 else Multiply(node, x)
    if isinstance(node, Variable):
        if node.name == var:
            return Divide(Power(x, Number(2.0)), Number(2.0))
        return Multiply(node, x)
    if not depends_on(node, var):
        return Multiply(node, x)

    if isinstance(node, Add):
        return Add(integrate(node.left, var), integrate(node.right, var))
    if isinstance(node, Subtract):
        return Subtract(integrate(node.left, var), integrate(node.right, var))
    if isinstance(node, Negate):
        return Negate(integrate(node.operand, var))

    if isinstance(node, Power):
        return _power(node, var)
    if isinstance(node, Multiply):
        return _product(node, var)
    if isinstance(node, Divide):
        return _quotient(node.left, node.right, var)
    if isinstance(node, Function) and node.name == 'frac' and len(node.args) == 2:
        return _quotient(node.args[0], node.args[1], var)

    raise UnsupportedOperationError(
        f"Integration of {type(node).__name__} is not supported"
    )


def _power(node, var):
    base, exponent = node.left, node.right
    if isinstance(base, Variable) and base.name == var and is_numeric_literal(exponent):
        n = literal_value(exponent)
        if n == -1:
            return _log_abs(var)
        raised = Number(n + 1)
        if isinstance(exponent, Rational):
            raised = Rational(exponent.numerator + exponent.denominator, exponent.denominator)
        return Divide(Power(base, raised), raised)
    raise UnsupportedOperationError(
        "Only powers of the integration variable with a numeric exponent can be integrated"
    )


def _product(node, var):
    left, right = node.left, node.right
    left_constant = not depends_on(left, var)
    right_constant = not depends_on(right, var)
    if left_constant and not right_constant:
        return Multiply(left, integrate(right, var))
    if right_constant and not left_constant:
        return Multiply(right, integrate(left, var))
    raise UnsupportedOperationError(
        "Integration of a product requires one factor to be constant"
    )


def _quotient(numerator, denominator, var):
    if (isinstance(denominator, Variable) and denominator.name == var
            and isinstance(numerator, Number) and numerator.value == 1):
        return _log_abs(var)
    if not depends_on(denominator, var):
        return Divide(integrate(numerator, var), denominator)
    raise UnsupportedOperationError(
        "Integration of a quotient is only supported for 1/x and constant denominators"
    )


def definite_integral(node, var, lower, upper):
    """F(upper) - F(lower) for the antiderivative F of ``node``."""
    antiderivative = integrate(node, var)
    upper_value = evaluate(antiderivative, Environment({var: upper}))
    lower_value = evaluate(antiderivative, Environment({var: lower}))
    logger.debug("definite integral of %s over [%s, %s]", node, lower, upper)
    return upper_value - lower_value