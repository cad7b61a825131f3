"""
sympy_bridge.py — Convert expression trees to SymPy
===================================================
Lets results of the rule-based passes be checked against SymPy's own
diff/integrate/simplify, and gives access to SymPy's LaTeX printer.
"""

from functools import reduce

import sympy as sp

from .errors import UnsupportedOperationError
from .nodes import (
    Abs, Add, Divide, Equal, Equation, Function, Greater, GreaterEqual,
    Less, LessEqual, Multiply, Negate, Number, Piecewise, Power, Rational,
    Sqrt, Subtract, Summation, Variable,
)

_BINARY = {
    Add: lambda a, b: a + b,
    Subtract: lambda a, b: a - b,
    Multiply: lambda a, b: a * b,
    Divide: lambda a, b: a / b,
    Power: lambda a, b: a ** b,
    Greater: sp.Gt,
    Less: sp.Lt,
    GreaterEqual: sp.Ge,
    LessEqual: sp.Le,
    Equal: sp.Eq,
    Equation: sp.Eq,
}

_FUNCTIONS = {
    'sin': sp.sin, 'cos': sp.cos, 'tan': sp.tan,
    'sinh': sp.sinh, 'cosh': sp.cosh, 'tanh': sp.tanh,
    'arcsin': sp.asin, 'arccos': sp.acos, 'arctan': sp.atan,
    'sec': sp.sec, 'csc': sp.csc, 'cot': sp.cot, 'coth': sp.coth,
    'ln': sp.log,
    'log': lambda x: sp.log(x, 10),
    'lg': lambda x: sp.log(x, 2),
    'exp': sp.exp,
    'sqrt': sp.sqrt,
    'abs': sp.Abs,
    'frac': lambda a, b: a / b,
    'min': sp.Min,
    'max': sp.Max,
    'det': lambda *args: sp.Mul(*args),
    'gcd': lambda *args: reduce(sp.gcd, args),
}


def _number(value):
    value = float(value)
    if value.is_integer():
        return sp.Integer(int(value))
    return sp.Float(value)


def to_sympy(node):
    """Return the SymPy expression equivalent to ``node``."""
    kind = type(node)
    if kind is Number:
        return _number(node.value)
    if kind is Variable:
        return sp.Symbol(node.name)
    if kind is Rational:
        return sp.Rational(node.numerator, node.denominator)
    if kind in _BINARY:
        return _BINARY[kind](to_sympy(node.left), to_sympy(node.right))
    if kind is Negate:
        return -to_sympy(node.operand)
    if kind is Sqrt:
        return sp.sqrt(to_sympy(node.operand))
    if kind is Abs:
        return sp.Abs(to_sympy(node.operand))
    if kind is Function:
        args = [to_sympy(arg) for arg in node.args]
        fn = _FUNCTIONS.get(node.name)
        if fn is None:
            return sp.Function(node.name)(*args)
        return fn(*args)
    if kind is Summation:
        index = sp.Symbol(node.index)
        return sp.Sum(to_sympy(node.body), (index, to_sympy(node.start), to_sympy(node.end)))
    if kind is Piecewise:
        return sp.Piecewise(*[(to_sympy(expr), _condition(guard))
                              for expr, guard in node.branches])
    raise UnsupportedOperationError(f"No SymPy equivalent for {kind.__name__}")


def _condition(guard):
    if isinstance(guard, Number):
        return sp.true if guard.value == 1 else sp.false
    return to_sympy(guard)


def sympy_latex(node):
    return sp.latex(to_sympy(node))
