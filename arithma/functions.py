"""
functions.py — Named function registry
======================================
Maps canonical function names (``sin``, ``frac``, ``max`` …) to an arity
contract and a numeric body.  The tokenizer, parser and evaluator all take a
registry explicitly; when none is given they share the default one, which is
built once on first use and frozen afterwards.
"""

import functools
import logging
import math
import threading
from collections import namedtuple

from .errors import ArithmaError, ArityError, DomainError, EvaluationError

logger = logging.getLogger(__name__)

# Arity marker for functions taking any positive number of arguments.
VARIADIC = None

# |tan(x)| below this makes cot(x) undefined.
COT_EPSILON = 1e-10

FunctionSpec = namedtuple('FunctionSpec', ['name', 'arity', 'body'])


class FunctionRegistry:
    """Name → FunctionSpec table with arity checking on every call."""

    def __init__(self):
        self._functions = {}
        self._frozen = False

    def register(self, name, arity, body, min_args=1):
        if self._frozen:
            raise ArithmaError(f"Registry is frozen; cannot register '{name}'")
        if arity is VARIADIC:
            body = _require_at_least(name, min_args, body)
        self._functions[name] = FunctionSpec(name, arity, body)

    def freeze(self):
        self._frozen = True
        return self

    def __contains__(self, name):
        return name in self._functions

    def __len__(self):
        return len(self._functions)

    def get(self, name):
        return self._functions.get(name)

    def arity(self, name):
        return self._functions[name].arity

    def names(self):
        return sorted(self._functions)

    def call(self, name, args):
        """Apply function ``name`` to a sequence of floats."""
        spec = self._functions.get(name)
        if spec is None:
            raise EvaluationError(f"Unknown function '{name}'")
        check_arity(spec, len(args))
        return float(spec.body(*args))


def check_arity(spec, count):
    if spec.arity is not VARIADIC and count != spec.arity:
        raise ArityError(
            f"Function '{spec.name}' expects {spec.arity} argument(s), got {count}"
        )


def _require_at_least(name, minimum, body):
    @functools.wraps(body)
    def checked(*args):
        if len(args) < minimum:
            noun = 'argument' if minimum == 1 else 'arguments'
            raise ArityError(f"Function '{name}' requires at least {minimum} {noun}")
        return body(*args)
    return checked


# ── Function bodies ─────────────────────────────────────────

def _sqrt(x):
    if x < 0:
        raise DomainError(f"Square root of negative number {x}")
    return math.sqrt(x)


def _positive_log(fn):
    def log(x):
        return fn(x) if x > 0 else math.nan
    return log


def _unit_interval(fn):
    def inverse(x):
        return fn(x) if -1.0 <= x <= 1.0 else math.nan
    return inverse


def _exp(x):
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _sinh(x):
    try:
        return math.sinh(x)
    except OverflowError:
        return math.copysign(math.inf, x)


def _cosh(x):
    try:
        return math.cosh(x)
    except OverflowError:
        return math.inf


def _sec(x):
    c = math.cos(x)
    return math.nan if c == 0 else 1.0 / c


def _csc(x):
    s = math.sin(x)
    return math.nan if s == 0 else 1.0 / s


def _cot(x):
    t = math.tan(x)
    return math.nan if abs(t) < COT_EPSILON else 1.0 / t


def _coth(x):
    t = math.tanh(x)
    return math.nan if t == 0 else 1.0 / t


def _frac(numerator, denominator):
    return math.nan if denominator == 0 else numerator / denominator


def _product(*args):
    return math.prod(args)


def _gcd(*args):
    return functools.reduce(math.gcd, (int(a) for a in args))


# ── Default registry ────────────────────────────────────────

def build_default_registry():
    """Build (without freezing) the standard function table."""
    reg = FunctionRegistry()

    reg.register('sin', 1, math.sin)
    reg.register('cos', 1, math.cos)
    reg.register('tan', 1, math.tan)
    reg.register('sinh', 1, _sinh)
    reg.register('cosh', 1, _cosh)
    reg.register('tanh', 1, math.tanh)
    reg.register('arcsin', 1, _unit_interval(math.asin))
    reg.register('arccos', 1, _unit_interval(math.acos))
    reg.register('arctan', 1, math.atan)
    reg.register('sec', 1, _sec)
    reg.register('csc', 1, _csc)
    reg.register('cot', 1, _cot)
    reg.register('coth', 1, _coth)

    reg.register('ln', 1, _positive_log(math.log))
    reg.register('log', 1, _positive_log(math.log10))
    reg.register('lg', 1, _positive_log(math.log2))
    reg.register('exp', 1, _exp)
    reg.register('sqrt', 1, _sqrt)
    reg.register('abs', 1, abs)
    reg.register('frac', 2, _frac)

    reg.register('min', VARIADIC, min)
    reg.register('max', VARIADIC, max)
    reg.register('det', VARIADIC, _product)
    reg.register('gcd', VARIADIC, _gcd, min_args=2)

    # Placeholders kept so existing LaTeX input still parses.
    reg.register('dim', 0, lambda: 1.0)
    reg.register('ker', 0, lambda: 0.0)
    reg.register('deg', 0, lambda: 1.0)
    reg.register('inf', VARIADIC, min)
    reg.register('sup', VARIADIC, max)
    reg.register('liminf', VARIADIC, min)
    reg.register('limsup', VARIADIC, max)
    reg.register('arg', 1, math.atan)
    reg.register('lim', 2, lambda value, point: value)

    return reg


_default_registry = None
_default_lock = threading.Lock()


def default_registry():
    """Return the shared, frozen registry, building it on first call."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = build_default_registry().freeze()
                logger.debug("Default function registry built with %d entries",
                             len(_default_registry))
    return _default_registry
