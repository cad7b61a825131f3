"""
test_evaluator.py — Tests for numeric evaluation.
Run:  pytest test_evaluator.py
"""
import math

import pytest

from arithma import (
    ArityError, DomainError, Environment, EvaluationError,
    UndefinedVariableError, build_default_registry, evaluate, parse_latex,
)
from arithma.nodes import Function, Less, Number, Piecewise, Rational, Sqrt, Variable


def value(latex, **bindings):
    return evaluate(parse_latex(latex), Environment(bindings))


# ── Arithmetic ────────────────────────────────────────────

@pytest.mark.parametrize('latex, expected', [
    ('2 + 3', 5),
    ('2 + 3 \\cdot 4', 14),
    ('10 - 2 \\cdot 3', 4),
    ('-5 + 3 - -2', 0),
    ('8 - 3 - 2', 3),
    ('2^3^2', 512),
    ('(2^3)^2', 64),
    ('\\frac{3}{4}', 0.75),
    ('\\frac34', 0.75),
    ('7 \\div 2', 3.5),
    ('\\sqrt{16}', 4),
    ('\\left|-3\\right|', 3),
    ('2\\pi', 2 * math.pi),
    ('\\mathrm{e}^{2}', math.e ** 2),
    ('2^{-1}', 0.5),
])
def test_arithmetic(latex, expected):
    assert value(latex) == pytest.approx(expected)


# ── Registry functions ────────────────────────────────────

@pytest.mark.parametrize('latex, expected', [
    ('\\sin{0}', 0),
    ('\\cos{0}', 1),
    ('\\sin{\\log{100}}', math.sin(2)),
    ('\\exp{1}', math.e),
    ('\\ln{\\mathrm{e}}', 1),
    ('\\lg{8}', 3),
    ('\\arctan{1}', math.pi / 4),
    ('\\max{1, 5, 3}', 5),
    ('\\min(4, 2)', 2),
    ('\\sup{3, 1, 4, 2}', 4),
    ('\\inf{3, 1, 4, 2}', 1),
    ('\\det{2, 3, 4}', 24),
    ('\\gcd{24, 36}', 12),
    ('\\gcd{24.9, 36}', 12),
    ('\\lim{5, 0}', 5),
    ('\\dim', 1),
    ('\\ker', 0),
])
def test_functions(latex, expected):
    assert value(latex) == pytest.approx(expected)


# ── Soft failures return NaN ──────────────────────────────

@pytest.mark.parametrize('latex', [
    '12/0',
    '\\frac{1}{0}',
    '\\csc{0}',
    '\\cot{0}',
    '\\coth{0}',
    '\\ln{0}',
    '\\log{-1}',
    '\\arcsin{2}',
    '(-8)^{0.5}',
])
def test_undefined_results_are_nan(latex):
    assert math.isnan(value(latex))


def test_zero_denominator_rational_is_nan():
    assert math.isnan(evaluate(Rational(1, 0)))


# ── Hard failures raise ───────────────────────────────────

def test_sqrt_of_negative_function_raises():
    with pytest.raises(DomainError):
        value('\\sqrt{-1}')


def test_sqrt_node_of_negative_raises():
    with pytest.raises(DomainError):
        evaluate(Sqrt(Number(-4)))


def test_undefined_variable():
    with pytest.raises(UndefinedVariableError) as excinfo:
        value('x + 1')
    assert excinfo.value.name == 'x'


def test_gcd_needs_two_arguments():
    with pytest.raises(ArityError):
        value('\\gcd{4}')


def test_unknown_function():
    with pytest.raises(EvaluationError):
        evaluate(Function('nosuch', [Number(1)]))


def test_equation_has_no_value():
    with pytest.raises(EvaluationError):
        value('x = 2', x=2)


# ── Variables, comparisons, piecewise ─────────────────────

def test_variables_from_environment():
    assert value('2x + 3y', x=1, y=2) == 8


@pytest.mark.parametrize('latex, expected', [
    ('3 > 2', 1.0),
    ('3 < 2', 0.0),
    ('2 >= 2', 1.0),
    ('3 <= 2', 0.0),
    ('2 == 2', 1.0),
])
def test_comparisons(latex, expected):
    assert value(latex) == expected


def test_piecewise_picks_first_true_branch():
    absolute = '\\begin{cases} x & x > 0 \\\\ -x & \\text{otherwise} \\end{cases}'
    assert value(absolute, x=2) == 2
    assert value(absolute, x=-3) == 3


def test_piecewise_without_matching_branch():
    node = Piecewise([(Number(1), Less(Variable('x'), Number(0)))])
    with pytest.raises(EvaluationError):
        evaluate(node, Environment({'x': 1}))


# ── Summation ─────────────────────────────────────────────

def test_summation_uses_environment_bounds():
    env = Environment({'n': 3})
    assert evaluate(parse_latex('\\sum_{i=1}^{n}(i+2)'), env) == 12
    assert 'i' not in env


def test_repeated_evaluation_is_stable():
    node = parse_latex('\\sum_{i=1}^{n}(i+x)')
    env = Environment({'n': 3, 'x': 2})
    first = evaluate(node, env)
    second = evaluate(node, env)
    assert first == second == 12
    assert env.names() == {'n', 'x'}
    assert env.get('i') is None


def test_empty_summation_is_zero():
    assert value('\\sum_{i=3}^{1} i') == 0


def test_summation_requires_integer_bounds():
    with pytest.raises(DomainError):
        value('\\sum_{i=1}^{2.5} i')


# ── Custom registry ───────────────────────────────────────

def test_custom_registry_is_threaded_through():
    registry = build_default_registry()
    registry.register('double', 1, lambda v: 2 * v)
    node = parse_latex('\\double{4} + 1', registry)
    assert evaluate(node, registry=registry) == 9
