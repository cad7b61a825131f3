"""
engine.py — LaTeX in, LaTeX out
===============================
Thin wrappers that parse LaTeX input, run one pass and render the result,
for front ends that only deal in strings.
"""

import logging

from .derivative import differentiate
from .environment import Environment
from .evaluator import evaluate
from .integration import definite_integral, integrate
from .nodes import to_latex
from .parser import parse_latex
from .simplify import simplify
from .substitute import compose, substitute

logger = logging.getLogger(__name__)


def _environment(values):
    if isinstance(values, Environment):
        return values
    return Environment(values)


def evaluate_latex(text, env=None):
    """Numeric value of ``text``; ``env`` may be an Environment or a dict."""
    return evaluate(parse_latex(text), _environment(env))


def simplify_latex(text, env=None):
    return to_latex(simplify(parse_latex(text), _environment(env)))


def differentiate_latex(text, var):
    derivative = differentiate(parse_latex(text), var)
    return to_latex(simplify(derivative))


def integrate_latex(text, var):
    antiderivative = integrate(parse_latex(text), var)
    return f"{to_latex(antiderivative)} + C"


def definite_integral_latex(text, var, lower, upper):
    return str(definite_integral(parse_latex(text), var, lower, upper))


def substitute_latex(text, substitutions):
    """Apply ``[(name, latex), ...]`` to ``text`` in order."""
    pairs = [(name, parse_latex(replacement)) for name, replacement in substitutions]
    return to_latex(substitute(parse_latex(text), pairs))


def compose_latex(outer, outer_var, inner):
    composed = compose(parse_latex(outer), outer_var, parse_latex(inner))
    logger.debug("composed %s with %s=%s", outer, outer_var, inner)
    return to_latex(simplify(composed))
