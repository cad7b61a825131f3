"""
nodes.py — Expression tree
==========================
Immutable node types produced by the parser and consumed by every pass, plus
the LaTeX renderer used by ``str(node)``.

Rendering inserts parentheses from operator precedence so that parsing the
rendered text gives back an equivalent tree.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple


@dataclass(frozen=True)
class Node:
    def __str__(self):
        return to_latex(self)


@dataclass(frozen=True)
class Number(Node):
    value: float


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class Rational(Node):
    numerator: int
    denominator: int


@dataclass(frozen=True)
class BinaryOp(Node):
    left: Node
    right: Node


class Add(BinaryOp):
    pass


class Subtract(BinaryOp):
    pass


class Multiply(BinaryOp):
    pass


class Divide(BinaryOp):
    pass


class Power(BinaryOp):
    pass


class Greater(BinaryOp):
    pass


class Less(BinaryOp):
    pass


class GreaterEqual(BinaryOp):
    pass


class LessEqual(BinaryOp):
    pass


class Equal(BinaryOp):
    pass


class Equation(BinaryOp):
    """``left = right``; has no numeric value of its own."""


@dataclass(frozen=True)
class UnaryOp(Node):
    operand: Node


class Sqrt(UnaryOp):
    pass


class Abs(UnaryOp):
    pass


class Negate(UnaryOp):
    pass


@dataclass(frozen=True)
class Piecewise(Node):
    """Ordered ``(expression, guard)`` branches; the first true guard wins."""
    branches: Tuple[Tuple[Node, Node], ...]

    def __post_init__(self):
        object.__setattr__(self, 'branches',
                           tuple((expr, guard) for expr, guard in self.branches))


@dataclass(frozen=True)
class Summation(Node):
    index: str
    start: Node
    end: Node
    body: Node


@dataclass(frozen=True)
class Function(Node):
    name: str
    args: Tuple[Node, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'args', tuple(self.args))


COMPARISONS = (Greater, Less, GreaterEqual, LessEqual, Equal)


# ── Tree helpers ────────────────────────────────────────────

def children(node):
    if isinstance(node, BinaryOp):
        return (node.left, node.right)
    if isinstance(node, UnaryOp):
        return (node.operand,)
    if isinstance(node, Function):
        return node.args
    if isinstance(node, Piecewise):
        return tuple(part for branch in node.branches for part in branch)
    if isinstance(node, Summation):
        return (node.start, node.end, node.body)
    return ()


def map_children(node, fn):
    """Return a copy of ``node`` with ``fn`` applied to each direct child."""
    if isinstance(node, BinaryOp):
        return type(node)(fn(node.left), fn(node.right))
    if isinstance(node, UnaryOp):
        return type(node)(fn(node.operand))
    if isinstance(node, Function):
        return Function(node.name, tuple(fn(arg) for arg in node.args))
    if isinstance(node, Piecewise):
        return Piecewise(tuple((fn(expr), fn(guard)) for expr, guard in node.branches))
    if isinstance(node, Summation):
        return Summation(node.index, fn(node.start), fn(node.end), fn(node.body))
    return node


def free_variables(node):
    """Names of the variables ``node`` depends on (summation indices excluded)."""
    if isinstance(node, Variable):
        return {node.name}
    if isinstance(node, Summation):
        return (free_variables(node.start) | free_variables(node.end)
                | (free_variables(node.body) - {node.index}))
    names = set()
    for child in children(node):
        names |= free_variables(child)
    return names


def depends_on(node, var):
    return var in free_variables(node)


def is_numeric_literal(node):
    """Number, Rational, or a negated Number."""
    if isinstance(node, (Number, Rational)):
        return True
    return isinstance(node, Negate) and isinstance(node.operand, Number)


def literal_value(node):
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Rational):
        return node.numerator / node.denominator
    if isinstance(node, Negate):
        return -literal_value(node.operand)
    raise TypeError(f"{type(node).__name__} is not a numeric literal")


# ── LaTeX rendering ─────────────────────────────────────────

_EQUATION, _COMPARISON, _SUM, _PRODUCT, _POWER, _UNARY, _ATOM = range(-1, 6)

_COMPARISON_SYMBOLS = {
    Greater: '>',
    Less: '<',
    GreaterEqual: '>=',
    LessEqual: '<=',
    Equal: '==',
}


def format_number(value):
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return '\\infty' if value > 0 else '-\\infty'
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    text = repr(value)
    if 'e' in text:
        text = format(Decimal(text), 'f')
    return text


def to_latex(node):
    return _render(node)[0]


def _wrap(node, min_prec):
    text, prec = _render(node)
    return f"({text})" if prec < min_prec else text


def _render(node):
    """Return ``(text, precedence)`` for ``node``."""
    if isinstance(node, Number):
        text = format_number(float(node.value))
        return text, (_UNARY if text.startswith('-') else _ATOM)
    if isinstance(node, Variable):
        return node.name, _ATOM
    if isinstance(node, Rational):
        return f"\\frac{{{node.numerator}}}{{{node.denominator}}}", _ATOM

    if isinstance(node, Add):
        return f"{_wrap(node.left, _SUM)} + {_wrap(node.right, _SUM)}", _SUM
    if isinstance(node, Subtract):
        return f"{_wrap(node.left, _SUM)} - {_wrap(node.right, _PRODUCT)}", _SUM
    if isinstance(node, Multiply):
        return _render_product(node)
    if isinstance(node, Divide):
        return f"{_wrap(node.left, _PRODUCT)} / {_wrap(node.right, _POWER)}", _PRODUCT
    if isinstance(node, Power):
        return f"{_wrap(node.left, _UNARY + 1)}^{{{to_latex(node.right)}}}", _POWER
    if isinstance(node, COMPARISONS):
        symbol = _COMPARISON_SYMBOLS[type(node)]
        return (f"{_wrap(node.left, _SUM)} {symbol} {_wrap(node.right, _SUM)}",
                _COMPARISON)
    if isinstance(node, Equation):
        return (f"{_wrap(node.left, _COMPARISON)} = {_wrap(node.right, _COMPARISON)}",
                _EQUATION)

    if isinstance(node, Negate):
        return f"-{_wrap(node.operand, _UNARY)}", _UNARY
    if isinstance(node, Sqrt):
        return f"\\sqrt{{{to_latex(node.operand)}}}", _ATOM
    if isinstance(node, Abs):
        return f"\\left|{to_latex(node.operand)}\\right|", _ATOM

    if isinstance(node, Function):
        return _render_function(node), _ATOM
    if isinstance(node, Summation):
        return (f"\\sum_{{{node.index}={to_latex(node.start)}}}"
                f"^{{{to_latex(node.end)}}}{{{to_latex(node.body)}}}"), _ATOM
    if isinstance(node, Piecewise):
        rows = ' \\\\ '.join(f"{to_latex(expr)} & {to_latex(guard)}"
                             for expr, guard in node.branches)
        return f"\\begin{{cases}} {rows} \\end{{cases}}", _ATOM

    raise TypeError(f"Cannot render {type(node).__name__}")


def _render_product(node):
    left, right = node.left, node.right
    if _is_literal(left, 0) or _is_literal(right, 0):
        return '0', _ATOM
    if _is_literal(left, 1):
        return _render(right)
    if _is_literal(right, 1):
        return _render(left)
    if isinstance(left, Number) and isinstance(right, Variable) and math.isfinite(left.value):
        return f"{format_number(float(left.value))}{right.name}", _PRODUCT
    return f"{_wrap(left, _PRODUCT)} \\cdot {_wrap(right, _PRODUCT)}", _PRODUCT


def _render_function(node):
    args = [to_latex(arg) for arg in node.args]
    if node.name == 'frac' and len(args) == 2:
        return f"\\frac{{{args[0]}}}{{{args[1]}}}"
    if node.name == 'sqrt' and len(args) == 1:
        return f"\\sqrt{{{args[0]}}}"
    if not args:
        return f"\\{node.name}"
    return f"\\{node.name}({', '.join(args)})"


def _is_literal(node, value):
    return isinstance(node, Number) and node.value == value
