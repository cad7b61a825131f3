"""
derivative.py — Symbolic differentiation
========================================
Rule-based, one node at a time: sum, product, quotient, power and chain
rules plus a small table of named functions.  Shapes without a rule raise
UnsupportedOperationError; nothing is approximated.  The output is not
simplified.
"""

from .errors import UnsupportedOperationError
from .nodes import (
    Abs, Add, Divide, Function, Multiply, Negate, Number, Power, Rational,
    Sqrt, Subtract, Summation, Variable, depends_on, is_numeric_literal,
    literal_value,
)


def _sqrt_rule(inner, d_inner):
    return Multiply(Divide(Number(1.0), Multiply(Number(2.0), Sqrt(inner))), d_inner)


def _abs_rule(inner, d_inner):
    return Multiply(Divide(inner, Abs(inner)), d_inner)


# name → (inner, d_inner) → derivative
_FUNCTION_RULES = {
    'sin': lambda f, df: Multiply(Function('cos', [f]), df),
    'cos': lambda f, df: Multiply(Negate(Function('sin', [f])), df),
    'tan': lambda f, df: Multiply(Power(Function('sec', [f]), Number(2.0)), df),
    'ln': lambda f, df: Multiply(Divide(Number(1.0), f), df),
    'log': lambda f, df: Multiply(
        Divide(Number(1.0), Multiply(f, Function('ln', [Number(10.0)]))), df),
    'exp': lambda f, df: Multiply(Function('exp', [f]), df),
    'abs': _abs_rule,
    'sqrt': _sqrt_rule,
}


def _power_term(n, base):
    """n · base^(n-1), collapsing exponents 0 and 1."""
    reduced = n - 1
    if reduced == 0:
        return Number(n)
    if reduced == 1:
        return Multiply(Number(n), base)
    return Multiply(Number(n), Power(base, Number(reduced)))


def differentiate(node, var):
    """d(node)/d(var)."""
    if isinstance(node, (Number, Rational)):
        return Number(0.0)
    if isinstance(node, Variable):
        return Number(1.0 if node.name == var else 0.0)

    if isinstance(node, Add):
        return Add(differentiate(node.left, var), differentiate(node.right, var))
    if isinstance(node, Subtract):
        return Subtract(differentiate(node.left, var), differentiate(node.right, var))
    if isinstance(node, Multiply):
        f, g = node.left, node.right
        return Add(Multiply(f, differentiate(g, var)), Multiply(g, differentiate(f, var)))
    if isinstance(node, Divide):
        return _quotient(node.left, node.right, var)
    if isinstance(node, Power):
        return _power(node.left, node.right, var)

    if isinstance(node, Negate):
        return Negate(differentiate(node.operand, var))
    if isinstance(node, Sqrt):
        return _sqrt_rule(node.operand, differentiate(node.operand, var))
    if isinstance(node, Abs):
        return _abs_rule(node.operand, differentiate(node.operand, var))

    if isinstance(node, Function):
        return _function(node, var)
    if isinstance(node, Summation):
        return _summation(node, var)

    raise UnsupportedOperationError(
        f"Differentiation of {type(node).__name__} is not supported"
    )


partial_derivative = differentiate


def _quotient(f, g, var):
    numerator = Subtract(Multiply(g, differentiate(f, var)), Multiply(f, differentiate(g, var)))
    return Divide(numerator, Power(g, Number(2.0)))


def _power(base, exponent, var):
    if depends_on(exponent, var):
        raise UnsupportedOperationError(
            f"Differentiating with respect to '{var}' in an exponent is not supported"
        )
    if is_numeric_literal(exponent):
        n = literal_value(exponent)
        if isinstance(base, Variable) and base.name == var:
            return _power_term(n, base)
        return Multiply(_power_term(n, base), differentiate(base, var))
    # g · f^(g-1) · f'
    lowered = Power(base, Subtract(exponent, Number(1.0)))
    return Multiply(Multiply(exponent, lowered), differentiate(base, var))


def _function(node, var):
    if node.name == 'frac' and len(node.args) == 2:
        return _quotient(node.args[0], node.args[1], var)
    rule = _FUNCTION_RULES.get(node.name)
    if rule is None or len(node.args) != 1:
        if not depends_on(node, var):
            return Number(0.0)
        raise UnsupportedOperationError(
            f"No differentiation rule for function '{node.name}'"
        )
    inner = node.args[0]
    return rule(inner, differentiate(inner, var))


def _summation(node, var):
    if node.index == var:
        return Number(0.0)
    if depends_on(node.start, var) or depends_on(node.end, var):
        raise UnsupportedOperationError(
            f"Summation bounds depend on '{var}'; cannot differentiate"
        )
    return Summation(node.index, node.start, node.end, differentiate(node.body, var))
