"""
parser.py — Token stream to expression tree
===========================================
Three stages:
  • shunting_yard()  — infix tokens → postfix, tracking function-argument
                       brace groups so ``\\frac{a}{b}`` emits ``frac`` only
                       once both groups are closed
  • build_tree()     — postfix → Node, enforcing function arity
  • summation reader — ``\\sum_{i=a}^{b} body`` is read directly from the
                       token list and its parts parsed recursively

``\\begin{cases} … \\end{cases}`` is read the same way into a Piecewise.
"""

import logging
import math

from .errors import ArityError, ParseError
from .functions import VARIADIC, check_arity, default_registry
from .nodes import (
    Abs, Add, Divide, Equal, Equation, Function, Greater, GreaterEqual,
    Less, LessEqual, Multiply, Negate, Number, Piecewise, Power, Subtract,
    Summation, Variable,
)
from .tokenizer import ABS_END, ABS_START, NEG, ROW_SEPARATOR, is_number_token, tokenize

logger = logging.getLogger(__name__)

PRECEDENCE = {
    NEG: 4,
    '^': 3,
    '*': 2, '/': 2,
    '+': 1, '-': 1,
    '>': 0, '<': 0, '>=': 0, '<=': 0, '==': 0,
    '=': -1,
}
RIGHT_ASSOCIATIVE = {'^'}

# Prefix-style calls (``\sin x``) take a following power but stop at a product.
FUNCTION_PRECEDENCE = 2.5

ABS = 'ABS'

# Marks where a variadic call's arguments begin in the postfix output.
ARGS_SENTINEL = '(args'

_BINARY_NODES = {
    '+': Add,
    '-': Subtract,
    '*': Multiply,
    '/': Divide,
    '^': Power,
    '>': Greater,
    '<': Less,
    '>=': GreaterEqual,
    '<=': LessEqual,
    '==': Equal,
    '=': Equation,
}

_OPENER_FOR = {')': '(', '}': '{'}

_CONSTANTS = {
    'e': math.e,
    'EULER': math.e,
    '\\pi': math.pi,
    'PI': math.pi,
}

_CASES_OPEN = ['begin', '{', 'cases', '}']
_CASES_CLOSE = ['end', '{', 'cases', '}']


def _is_name(token):
    return token[:1].isalpha() and token.isalnum()


class _CallFrame:
    """Bookkeeping for a function whose argument brackets are open."""

    def __init__(self, name, arity, op_index):
        self.name = name
        self.arity = arity
        self.op_index = op_index
        self.group_index = None
        self.args = 0
        self.has_operand = False

    def close_argument(self, final):
        if self.has_operand:
            self.args += 1
        elif not final or self.args:
            raise ParseError(f"Empty argument in call to '{self.name}'")
        self.has_operand = False


# ── Stage A: shunting-yard ──────────────────────────────────

def shunting_yard(tokens, registry=None):
    """Convert infix tokens to a postfix token list."""
    registry = default_registry() if registry is None else registry
    output = []
    ops = []
    frames = []

    def mark_operand():
        if frames and frames[-1].group_index is not None:
            frames[-1].has_operand = True

    def pop_to_opener(closer):
        while ops and ops[-1] not in ('(', '{', ABS_START):
            output.append(ops.pop())
        if not ops:
            raise ParseError(f"Mismatched '{closer}': no matching opening bracket")
        return len(ops) - 1

    for i, token in enumerate(tokens):
        if is_number_token(token):
            output.append(token)
            mark_operand()

        elif token in registry:
            mark_operand()
            ops.append(token)

        elif token == NEG:
            ops.append(token)

        elif token in ('(', '{'):
            if ops and ops[-1] in registry:
                fn_index = len(ops) - 1
                if frames and frames[-1].op_index == fn_index:
                    frame = frames[-1]
                else:
                    frame = _CallFrame(ops[-1], registry.arity(ops[-1]), fn_index)
                    frames.append(frame)
                    if frame.arity is VARIADIC:
                        output.append(ARGS_SENTINEL)
                ops.append(token)
                frame.group_index = len(ops) - 1
                frame.has_operand = False
            else:
                ops.append(token)

        elif token == ',':
            index = pop_to_opener(token)
            if not frames or frames[-1].group_index != index:
                raise ParseError("Unexpected ',' outside a function call")
            frames[-1].close_argument(final=False)

        elif token in _OPENER_FOR:
            index = pop_to_opener(token)
            if ops[-1] != _OPENER_FOR[token]:
                raise ParseError(f"Mismatched '{token}' closes '{ops[-1]}'")
            ops.pop()
            if frames and frames[-1].group_index == index:
                frame = frames[-1]
                frame.close_argument(final=True)
                frame.group_index = None
                following = tokens[i + 1] if i + 1 < len(tokens) else None
                if (frame.arity is not VARIADIC and frame.args < frame.arity
                        and following == '{'):
                    continue
                frames.pop()
                name = ops.pop()
                check_arity(registry.get(name), frame.args)
                output.append(name)

        elif token == ABS_START:
            ops.append(token)

        elif token == ABS_END:
            pop_to_opener(token)
            if ops[-1] != ABS_START:
                raise ParseError(f"Mismatched absolute value: '{ops[-1]}' is still open")
            ops.pop()
            output.append(ABS)

        elif token in PRECEDENCE:
            while ops and _pops_before(ops[-1], token, registry):
                output.append(ops.pop())
            ops.append(token)

        elif _is_name(token) or token in _CONSTANTS:
            output.append(token)
            mark_operand()

        else:
            raise ParseError(f"Unknown token '{token}'")

    while ops:
        top = ops.pop()
        if top in ('(', '{', ABS_START):
            raise ParseError("Mismatched brackets: unclosed opening bracket")
        output.append(top)

    logger.debug("shunting_yard %s -> %s", tokens, output)
    return output


def _pops_before(top, token, registry):
    if top in ('(', '{', ABS_START):
        return False
    top_prec = FUNCTION_PRECEDENCE if top in registry else PRECEDENCE[top]
    prec = PRECEDENCE[token]
    if token in RIGHT_ASSOCIATIVE:
        return top_prec > prec
    return top_prec >= prec


# ── Stage B: tree building ──────────────────────────────────

def build_tree(postfix, registry=None):
    """Build a Node from postfix tokens."""
    registry = default_registry() if registry is None else registry
    stack = []

    def pop_operand(token):
        if not stack or stack[-1] == ARGS_SENTINEL:
            raise ParseError(f"Not enough operands for '{token}'")
        return stack.pop()

    for token in postfix:
        if token == ARGS_SENTINEL:
            stack.append(token)
        elif is_number_token(token):
            stack.append(Number(_to_float(token)))
        elif token == NEG:
            stack.append(Negate(pop_operand(token)))
        elif token == ABS:
            stack.append(Abs(pop_operand(token)))
        elif token in _BINARY_NODES:
            right = pop_operand(token)
            left = pop_operand(token)
            stack.append(_BINARY_NODES[token](left, right))
        elif token in registry:
            stack.append(_build_call(token, registry.get(token), stack))
        elif token in _CONSTANTS:
            stack.append(Number(_CONSTANTS[token]))
        elif _is_name(token):
            stack.append(Variable(token))
        else:
            raise ParseError(f"Unknown token '{token}'")

    if len(stack) != 1 or stack[0] == ARGS_SENTINEL:
        raise ParseError("The expression did not resolve into a single tree")
    return stack[0]


def _build_call(name, spec, stack):
    args = []
    if spec.arity is VARIADIC:
        while stack and stack[-1] != ARGS_SENTINEL:
            args.append(stack.pop())
        if stack:
            stack.pop()
        if not args:
            raise ArityError(f"Function '{name}' requires at least one argument")
    else:
        for _ in range(spec.arity):
            if not stack or stack[-1] == ARGS_SENTINEL:
                raise ArityError(f"Not enough operands for function '{name}'")
            args.append(stack.pop())
    args.reverse()
    return Function(name, args)


def _to_float(token):
    try:
        return float(token)
    except ValueError:
        raise ParseError(f"Malformed number '{token}'") from None


# ── Stage C: summation ──────────────────────────────────────

def _expect(tokens, pos, expected):
    found = tokens[pos] if pos < len(tokens) else None
    if found != expected:
        raise ParseError(f"Expected '{expected}' in summation, found '{found}'")
    return pos + 1


def _read_braced(tokens, pos):
    """Return (inner tokens, position after the closing brace) for a '{' at pos."""
    pos = _expect(tokens, pos, '{')
    depth = 1
    start = pos
    while pos < len(tokens):
        if tokens[pos] == '{':
            depth += 1
        elif tokens[pos] == '}':
            depth -= 1
            if depth == 0:
                return tokens[start:pos], pos + 1
        pos += 1
    raise ParseError("Unclosed '{' in summation")


def _scan_body(tokens, pos):
    """Unbraced summation body: runs to the first top-level '=' or nested 'sum'."""
    start = pos
    if pos < len(tokens) and tokens[pos] == 'sum':
        pos += 1
        stops = ('=',)
    else:
        stops = ('=', 'sum')
    depth = 0
    while pos < len(tokens):
        token = tokens[pos]
        if token in ('(', '{', ABS_START):
            depth += 1
        elif token in (')', '}', ABS_END):
            depth -= 1
        elif depth == 0 and token in stops:
            break
        pos += 1
    return tokens[start:pos], pos


def parse_summation(tokens, registry=None):
    """Parse ``sum _ { i = a } ^ b body [= rhs]``."""
    registry = default_registry() if registry is None else registry
    pos = _expect(tokens, 0, 'sum')
    pos = _expect(tokens, pos, '_')
    lower, pos = _read_braced(tokens, pos)
    if len(lower) < 3 or not _is_name(lower[0]) or lower[1] != '=':
        raise ParseError("Summation lower bound must look like {i = start}")
    index = lower[0]
    start_tokens = lower[2:]

    pos = _expect(tokens, pos, '^')
    if pos < len(tokens) and tokens[pos] == '{':
        end_tokens, pos = _read_braced(tokens, pos)
    elif pos < len(tokens):
        end_tokens = [tokens[pos]]
        pos += 1
        # ^3i tokenizes as 3 * i; the product belongs to the body.
        if pos < len(tokens) and tokens[pos] == '*':
            pos += 1
    else:
        raise ParseError("Summation is missing its upper bound")

    body_tokens = None
    if pos < len(tokens) and tokens[pos] == '{':
        braced, after = _read_braced(tokens, pos)
        if after == len(tokens) or tokens[after] == '=':
            body_tokens, pos = braced, after
    if body_tokens is None:
        body_tokens, pos = _scan_body(tokens, pos)
    if not body_tokens:
        raise ParseError("Summation has an empty body")

    node = Summation(index, parse(start_tokens, registry), parse(end_tokens, registry),
                     parse(body_tokens, registry))
    rest = tokens[pos:]
    if not rest:
        return node
    if rest[0] != '=':
        raise ParseError(f"Unexpected '{rest[0]}' after summation")
    return Equation(node, parse(rest[1:], registry))


# ── Cases environment ───────────────────────────────────────

def _split_top_level(tokens, separator):
    parts = [[]]
    depth = 0
    for token in tokens:
        if token in ('(', '{', ABS_START):
            depth += 1
        elif token in (')', '}', ABS_END):
            depth -= 1
        if depth == 0 and token == separator:
            parts.append([])
        else:
            parts[-1].append(token)
    return parts


def parse_cases(tokens, registry=None):
    """Parse ``\\begin{cases} expr & guard \\\\ … \\end{cases}`` into a Piecewise."""
    registry = default_registry() if registry is None else registry
    if tokens[-4:] != _CASES_CLOSE:
        raise ParseError("Unterminated cases environment")
    branches = []
    for row in _split_top_level(tokens[4:-4], ROW_SEPARATOR):
        if not row:
            continue
        cells = _split_top_level(row, '&')
        if len(cells) != 2 or not cells[0]:
            raise ParseError("Each case must look like 'expression & condition'")
        expr, guard = cells
        if guard[:1] == ['if']:
            guard = guard[1:]
        if not guard or guard == ['otherwise']:
            guard_node = Number(1.0)
        else:
            guard_node = parse(guard, registry)
        branches.append((parse(expr, registry), guard_node))
    if not branches:
        raise ParseError("Empty cases environment")
    return Piecewise(branches)


# ── Entry points ────────────────────────────────────────────

def parse(tokens, registry=None):
    """Parse a token list into a single expression tree."""
    registry = default_registry() if registry is None else registry
    tokens = list(tokens)
    if not tokens:
        raise ParseError("Empty expression")
    if tokens[:4] == _CASES_OPEN:
        return parse_cases(tokens, registry)
    if 'sum' in tokens:
        if tokens[0] != 'sum':
            raise ParseError("A summation must start the expression")
        return parse_summation(tokens, registry)
    return build_tree(shunting_yard(tokens, registry), registry)


build_expression_tree = parse


def parse_latex(text, registry=None):
    registry = default_registry() if registry is None else registry
    return parse(tokenize(text, registry), registry)
