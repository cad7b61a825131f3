"""
test_tokenizer.py — Tests for LaTeX tokenization.
Run:  pytest test_tokenizer.py
"""
import pytest

from arithma.tokenizer import E_LITERAL, PI_LITERAL, tokenize

# ── Numbers, names and implicit products ──────────────────

@pytest.mark.parametrize('latex, expected', [
    ('2x + 3y', ['2', '*', 'x', '+', '3', '*', 'y']),
    ('123 45.67', ['123', '45.67']),
    ('x2 + 1', ['x2', '+', '1']),
    ('2.5x', ['2.5', '*', 'x']),
    ('\\alpha + 1', ['alpha', '+', '1']),
    ('2\\pi', ['2', '*', PI_LITERAL]),
    ('\\pi', [PI_LITERAL]),
    ('\\mathrm{e}', [E_LITERAL]),
    ('', []),
])
def test_operands(latex, expected):
    assert tokenize(latex) == expected


# ── Negation versus subtraction ───────────────────────────

@pytest.mark.parametrize('latex, expected', [
    ('-5 + 3 - -2', ['NEG', '5', '+', '3', '-', 'NEG', '2']),
    ('x - 1', ['x', '-', '1']),
    ('x^{-2}', ['x', '^', '{', 'NEG', '2', '}']),
    ('(-x)', ['(', 'NEG', 'x', ')']),
    ('x = -4', ['x', '=', 'NEG', '4']),
    ('\\max(1, -2)', ['max', '(', '1', ',', 'NEG', '2', ')']),
])
def test_negation(latex, expected):
    assert tokenize(latex) == expected


# ── Commands ──────────────────────────────────────────────

@pytest.mark.parametrize('latex, expected', [
    ('\\frac34', ['3', '/', '4']),
    ('\\frac{3}{4}', ['frac', '{', '3', '}', '{', '4', '}']),
    ('3 \\cdot 4', ['3', '*', '4']),
    ('3 \\times 4', ['3', '*', '4']),
    ('6 \\div 2', ['6', '/', '2']),
    ('\\sin{x}', ['sin', '{', 'x', '}']),
    ('\\left(x\\right)', ['(', 'x', ')']),
    ('\\left[x\\right]', ['(', 'x', ')']),
    ('\\left|x\\right|', ['ABS_START', 'x', 'ABS_END']),
    ('x \\le 1', ['x', '<=', '1']),
    ('x \\geq 1', ['x', '>=', '1']),
    ('\\operatorname{sin}{x}', ['sin', '{', 'x', '}']),
    ('\\sum_{i=1}^{3} i',
     ['sum', '_', '{', 'i', '=', '1', '}', '^', '{', '3', '}', 'i']),
])
def test_commands(latex, expected):
    assert tokenize(latex) == expected


# ── Comparison and logical operators ──────────────────────

@pytest.mark.parametrize('latex, expected', [
    ('x >= 2', ['x', '>=', '2']),
    ('x <= 2', ['x', '<=', '2']),
    ('x > 2', ['x', '>', '2']),
    ('a == b', ['a', '==', 'b']),
    ('a && b', ['a', '&&', 'b']),
    ('x = 5', ['x', '=', '5']),
])
def test_comparisons(latex, expected):
    assert tokenize(latex) == expected


def test_unrecognised_characters_pass_through():
    assert tokenize('x $ 2') == ['x', '$', '2']


def test_spacing_commands_are_ignored():
    assert tokenize('x\\,+\\;1') == ['x', '+', '1']
