"""
test_engine.py — End-to-end tests: LaTeX in, LaTeX or numbers out.
Run:  pytest test_engine.py
"""
import pytest

from arithma import (
    ArithmaError, Environment, definite_integral_latex, differentiate_latex,
    evaluate, evaluate_latex, integrate_latex, parse_latex, simplify_latex,
    sympy_latex, to_latex,
)
from arithma.nodes import (
    Abs, Add, Multiply, Negate, Number, Piecewise, Greater, Power, Rational,
    Summation, Variable,
)

x = Variable('x')

# ── Basic Arithmetic ──────────────────────────────────────

@pytest.mark.parametrize('description, latex, expected', [
    ('2 + 3 = 5', '2+3', 5),
    ('fraction', '\\frac{10}{4}', 2.5),
    ('implicit product', '3x', 6),
    ('nested functions', '\\sqrt{\\max{9, 4}}', 3),
    ('absolute value', '\\left|x - 5\\right|', 3),
])
def test_evaluate_latex(description, latex, expected):
    assert evaluate_latex(latex, {'x': 2}) == pytest.approx(expected)


def test_environment_object_is_accepted():
    assert evaluate_latex('x^2', Environment({'x': 3})) == 9


def test_simplify_latex():
    assert simplify_latex('2x + 3x') == '5x'
    assert simplify_latex('\\sum_{i=1}^{n} i', {'n': 4}) == '10'


# ── Calculus ──────────────────────────────────────────────

def test_differentiate_latex():
    assert differentiate_latex('x^2', 'x') == '2x'
    assert differentiate_latex('3x + 1', 'x') == '3'


def test_differentiate_latex_evaluates_correctly():
    result = differentiate_latex('x^3 + 2x', 'x')
    assert evaluate_latex(result, {'x': 2}) == pytest.approx(14)


def test_integrate_latex_appends_constant():
    assert integrate_latex('x^2', 'x') == 'x^{3} / 3 + C'


def test_definite_integral_latex():
    assert float(definite_integral_latex('x^2', 'x', 1, 3)) == pytest.approx(26 / 3)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        evaluate_latex('(1 + 2')
    with pytest.raises(ArithmaError):
        integrate_latex('\\sin{x}', 'x')


# ── Rendering ─────────────────────────────────────────────

@pytest.mark.parametrize('node, expected', [
    (Multiply(Number(2), x), '2x'),
    (Multiply(Number(3), Number(4)), '3 \\cdot 4'),
    (Multiply(x, Number(1)), 'x'),
    (Multiply(x, Number(0)), '0'),
    (Power(Add(x, Number(1)), Number(2)), '(x + 1)^{2}'),
    (Negate(Power(x, Number(2))), '-(x^{2})'),
    (Rational(3, 4), '\\frac{3}{4}'),
    (Abs(x), '\\left|x\\right|'),
    (Number(0.5), '0.5'),
    (Summation('i', Number(1), Number(3), Variable('i')), '\\sum_{i=1}^{3}{i}'),
])
def test_render(node, expected):
    assert to_latex(node) == expected
    assert str(node) == expected


@pytest.mark.parametrize('node', [
    Summation('i', Number(1), Variable('n'), Add(Variable('i'), Number(2))),
    Piecewise([(x, Greater(x, Number(0))), (Negate(x), Number(1))]),
    Abs(Add(x, Number(1))),
    Multiply(Number(2), x),
])
def test_render_parses_back_to_same_tree(node):
    assert parse_latex(to_latex(node)) == node


ROUND_TRIP = [
    '1 + 2 \\cdot 3',
    '(1 + 2) \\cdot 3',
    '2^3^2',
    '(2^3)^2',
    '8 - (3 - 2)',
    '8 / (4 / 2)',
    '-x^2',
    '-(x^2)',
    '\\frac{x}{y + 1}',
    '\\sqrt{x + 1}',
    '\\left|x - 3\\right|',
    '\\sin{x} + \\cos{y}',
    '\\max{x, y, 2}',
    '2x + 3y',
    'x / 2x',
    'x - -3',
    'x^{-2}',
    '2 \\cdot -x',
    'x > 2',
    '\\ln{x} \\cdot \\exp{y}',
    '1 / (2 \\cdot x)',
    '\\sum_{i=1}^{4} i \\cdot x',
]


@pytest.mark.parametrize('latex', ROUND_TRIP)
def test_round_trip_preserves_value(latex):
    env = Environment({'x': 1.7, 'y': 0.3})
    original = parse_latex(latex)
    reparsed = parse_latex(to_latex(original))
    assert evaluate(reparsed, env) == pytest.approx(evaluate(original, env))


@pytest.mark.parametrize('latex, expected', [
    ('x^2 + 1', 'x^{2} + 1'),
    ('\\sqrt{x}', '\\sqrt{x}'),
    ('\\frac{1}{2}', '\\frac{1}{2}'),
])
def test_sympy_latex(latex, expected):
    assert sympy_latex(parse_latex(latex)) == expected
