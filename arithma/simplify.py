"""
simplify.py — Local algebraic simplification
============================================
A single bottom-up pass of rewrite rules:
  • additive chains are collected into per-variable coefficients
  • multiplicative and power identities (×0, ×1, ^0, ^1) are applied
  • literal arithmetic is folded, rationals exactly via SymPy
  • short summations with known integer bounds are unrolled

The result is a fixed point: simplifying it again changes nothing.
"""

import logging
import math
from collections import defaultdict
from functools import reduce

import sympy as sp

from .evaluator import evaluate
from .nodes import (
    Add, Divide, Multiply, Negate, Number, Power, Rational, Subtract,
    Summation, Variable, free_variables, map_children,
)
from .substitute import substitute_variable

logger = logging.getLogger(__name__)

# Summations with at most this many terms are expanded in place.
SUMMATION_UNROLL_LIMIT = 10

_CONSTANT_TERM = ''


def _is_value(node, value):
    return isinstance(node, Number) and node.value == value


def _from_sympy_rational(value):
    if value.q == 1:
        return Number(float(value.p))
    return Rational(int(value.p), int(value.q))


class Simplifier:
    def __init__(self, env=None):
        self.env = env

    def simplify(self, node):
        if isinstance(node, (Add, Subtract, Negate)):
            return self._sum(node)
        if isinstance(node, Multiply):
            return self._product(node)
        if isinstance(node, Power):
            return self._power(node)
        if isinstance(node, Divide):
            left, right = self.simplify(node.left), self.simplify(node.right)
            return left if _is_value(right, 1) else Divide(left, right)
        if isinstance(node, Rational):
            if node.denominator == 0:
                return Number(math.nan)
            return _from_sympy_rational(sp.Rational(node.numerator, node.denominator))
        if isinstance(node, Summation):
            return self._summation(node)
        return map_children(node, self.simplify)

    # ── Additive chains ─────────────────────────────────────

    def _sum(self, node):
        node = map_children(node, self.simplify)
        coefficients = defaultdict(float)
        others = []
        _collect(node, 1.0, coefficients, others)
        return _rebuild_sum(coefficients, others)

    # ── Products and powers ─────────────────────────────────

    def _product(self, node):
        left, right = self.simplify(node.left), self.simplify(node.right)
        if _is_value(left, 0) or _is_value(right, 0):
            return Number(0.0)
        if _is_value(left, 1):
            return right
        if _is_value(right, 1):
            return left
        if isinstance(left, Rational) and isinstance(right, Rational):
            product = (sp.Rational(left.numerator, left.denominator)
                       * sp.Rational(right.numerator, right.denominator))
            return _from_sympy_rational(product)
        if isinstance(left, Number) and isinstance(right, Number):
            return Number(left.value * right.value)
        if isinstance(right, Number):
            left, right = right, left
        if isinstance(left, Number) and isinstance(right, Negate):
            left, right = Number(-left.value), right.operand
            if _is_value(left, 1):
                return right
        if (isinstance(left, Number) and isinstance(right, Multiply)
                and isinstance(right.left, Number)):
            coefficient = left.value * right.left.value
            if coefficient == 0:
                return Number(0.0)
            if coefficient == 1:
                return right.right
            if coefficient == -1:
                return Negate(right.right)
            return Multiply(Number(coefficient), right.right)
        if _is_value(left, -1):
            return Negate(right)
        return Multiply(left, right)

    def _power(self, node):
        base, exponent = self.simplify(node.left), self.simplify(node.right)
        if _is_value(exponent, 0):
            return Number(1.0)
        if _is_value(exponent, 1):
            return base
        if isinstance(base, Number) and isinstance(exponent, Number):
            try:
                return Number(math.pow(base.value, exponent.value))
            except (ValueError, OverflowError):
                pass
        return Power(base, exponent)

    # ── Summation ───────────────────────────────────────────

    def _bound(self, node):
        if isinstance(node, Number):
            return node.value
        if self.env is not None and free_variables(node) <= self.env.names():
            return evaluate(node, self.env)
        return None

    def _summation(self, node):
        start, end = self.simplify(node.start), self.simplify(node.end)
        body = self.simplify(node.body)
        lo, hi = self._bound(start), self._bound(end)
        if (lo is not None and hi is not None
                and float(lo).is_integer() and float(hi).is_integer()):
            count = int(hi) - int(lo) + 1
            if count <= 0:
                return Number(0.0)
            if count <= SUMMATION_UNROLL_LIMIT:
                terms = [substitute_variable(body, node.index, Number(float(k)))
                         for k in range(int(lo), int(hi) + 1)]
                logger.debug("unrolling summation over %s into %d terms", node.index, count)
                return self.simplify(reduce(Add, terms))
        return Summation(node.index, start, end, body)


def _collect(node, sign, coefficients, others):
    if isinstance(node, Add):
        _collect(node.left, sign, coefficients, others)
        _collect(node.right, sign, coefficients, others)
    elif isinstance(node, Subtract):
        _collect(node.left, sign, coefficients, others)
        _collect(node.right, -sign, coefficients, others)
    elif isinstance(node, Negate):
        _collect(node.operand, -sign, coefficients, others)
    elif isinstance(node, Number):
        coefficients[_CONSTANT_TERM] += sign * node.value
    elif isinstance(node, Variable):
        coefficients[node.name] += sign
    elif (isinstance(node, Multiply) and isinstance(node.left, Number)
          and isinstance(node.right, Variable)):
        coefficients[node.right.name] += sign * node.left.value
    else:
        others.append((sign, node))


def _term(name, coefficient):
    """Node for ``coefficient * name``; the empty name is the constant term."""
    if name == _CONSTANT_TERM:
        return Number(coefficient)
    if coefficient == 1:
        return Variable(name)
    return Multiply(Number(coefficient), Variable(name))


def _rebuild_sum(coefficients, others):
    parts = []
    for name in sorted(coefficients):
        coefficient = coefficients[name]
        if coefficient == 0:
            continue
        parts.append((coefficient < 0, name, abs(coefficient)))
    parts.extend((sign < 0, None, node) for sign, node in others)

    if not parts:
        return Number(0.0)

    negative, name, first = parts[0]
    if name is None:
        result = Negate(first) if negative else first
    elif name == _CONSTANT_TERM:
        result = Number(-first if negative else first)
    elif negative and first == 1:
        result = Negate(Variable(name))
    else:
        result = _term(name, -first if negative else first)

    for negative, name, magnitude in parts[1:]:
        term = magnitude if name is None else _term(name, magnitude)
        result = Subtract(result, term) if negative else Add(result, term)
    return result


def simplify(node, env=None):
    """Return a simplified copy of ``node``.

    ``env`` only supplies values for summation bounds; no other variable is
    replaced.
    """
    return Simplifier(env).simplify(node)
