"""
tokenizer.py — LaTeX to token stream
====================================
Turns LaTeX-flavoured input such as ``\\frac{x}{2} + 2x`` into a flat list
of string tokens for the parser.  The tokenizer never fails: characters it
does not recognise are passed through as single-character tokens so the
parser can report them.
"""

import logging
import math
import re

from .functions import default_registry

logger = logging.getLogger(__name__)

PI_LITERAL = repr(math.pi)
E_LITERAL = repr(math.e)

NEG = 'NEG'
ABS_START = 'ABS_START'
ABS_END = 'ABS_END'
ROW_SEPARATOR = '\\\\'

# Tokens after which a '-' is a negation rather than a subtraction.
OPERATOR_TOKENS = frozenset({
    '+', '-', '*', '/', '^', '=', '==', '>', '<', '>=', '<=', '&&', '&', ',', NEG,
})
_UNARY_CONTEXT = OPERATOR_TOKENS | {'(', '{', ABS_START, ROW_SEPARATOR}

# LaTeX commands that spell an operator.
_COMMAND_OPERATORS = {
    'cdot': '*',
    'times': '*',
    'div': '/',
    'le': '<=',
    'leq': '<=',
    'ge': '>=',
    'geq': '>=',
}

# Spacing commands: \, \; \: \! and '\ '
_SPACING = set(',;:! ')

_NUMBER_RE = re.compile(r'\d+\.?\d*|\.\d+')


def is_number_token(token):
    return token is not None and _NUMBER_RE.fullmatch(token) is not None


class Tokenizer:
    def __init__(self, text, registry=None):
        self.text = text
        self.registry = registry if registry is not None else default_registry()
        self.pos = 0
        self.current = text[0] if text else None
        self.tokens = []

    def advance(self, count=1):
        self.pos += count
        self.current = self.text[self.pos] if self.pos < len(self.text) else None

    def peek(self, offset=1):
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else None

    def skip_spaces(self):
        while self.current and self.current.isspace():
            self.advance()

    def last(self):
        return self.tokens[-1] if self.tokens else None

    # ── Emitters ─────────────────────────────────────────────

    def emit(self, token):
        self.tokens.append(token)

    def emit_operand(self, token):
        """Emit a name or literal, inserting '*' after a bare number (``2x``)."""
        if is_number_token(self.last()):
            self.tokens.append('*')
        self.tokens.append(token)

    # ── Readers ──────────────────────────────────────────────

    def read_number(self):
        start = self.pos
        while self.current and (self.current.isdigit() or self.current == '.'):
            self.advance()
        return self.text[start:self.pos]

    def read_name(self):
        start = self.pos
        while self.current and self.current.isalnum():
            self.advance()
        return self.text[start:self.pos]

    def read_letters(self):
        start = self.pos
        while self.current and self.current.isalpha():
            self.advance()
        return self.text[start:self.pos]

    def read_group(self):
        """Read a ``{...}`` argument verbatim (no nesting) and return its text."""
        self.skip_spaces()
        if self.current != '{':
            return None
        self.advance()
        start = self.pos
        while self.current and self.current != '}':
            self.advance()
        inner = self.text[start:self.pos]
        if self.current == '}':
            self.advance()
        return inner.strip()

    def read_command(self):
        self.advance()  # the backslash
        if self.current is None:
            self.emit('\\')
            return
        if self.current == '\\':
            self.advance()
            self.emit(ROW_SEPARATOR)
            return
        if self.current in _SPACING:
            self.advance()
            return
        if self.current in '{}':
            self.emit('(' if self.current == '{' else ')')
            self.advance()
            return
        if not self.current.isalpha():
            self.emit('\\')
            return

        name = self.read_letters()
        if name in _COMMAND_OPERATORS:
            self.emit(_COMMAND_OPERATORS[name])
        elif name == 'pi':
            self.emit_operand(PI_LITERAL)
        elif name in ('left', 'right'):
            self.read_delimiter(opening=(name == 'left'))
        elif name == 'frac' and self._digit_pair_follows():
            self.emit_operand(self.current)
            self.emit('/')
            self.emit(self.peek())
            self.advance(2)
        elif name in ('mathrm', 'operatorname', 'text'):
            inner = self.read_group()
            if inner == 'e' and name == 'mathrm':
                self.emit_operand(E_LITERAL)
            elif inner:
                self.emit_operand(inner)
        elif name == 'sum':
            self.emit('sum')
        elif name in self.registry:
            self.emit_operand(name)
        else:
            self.emit(name)

    def read_delimiter(self, opening):
        self.skip_spaces()
        if self.current == '|':
            self.advance()
            self.emit(ABS_START if opening else ABS_END)
            return
        if self.current and self.current in '()[].':
            self.advance()
        elif self.current == '\\' and self.peek() in ('{', '}'):
            self.advance(2)
        self.emit('(' if opening else ')')

    def _digit_pair_follows(self):
        second = self.peek()
        return (self.current is not None and self.current.isdigit()
                and second is not None and second.isdigit())

    # ── Main loop ────────────────────────────────────────────

    def tokenize(self):
        while self.current:
            ch = self.current
            if ch.isspace():
                self.skip_spaces()
            elif ch.isdigit() or ch == '.':
                self.emit(self.read_number())
            elif ch.isalpha():
                self.emit_operand(self.read_name())
            elif ch == '\\':
                self.read_command()
            elif ch == '-':
                self.emit(NEG if self.last() is None or self.last() in _UNARY_CONTEXT else '-')
                self.advance()
            elif ch in '<>':
                if self.peek() == '=':
                    self.emit(ch + '=')
                    self.advance(2)
                else:
                    self.emit(ch)
                    self.advance()
            elif ch in '=&':
                if self.peek() == ch:
                    self.emit(ch * 2)
                    self.advance(2)
                else:
                    self.emit(ch)
                    self.advance()
            elif ch in '[]':
                self.emit('(' if ch == '[' else ')')
                self.advance()
            else:
                # operators, brackets, '_', ',' and anything unrecognised
                self.emit(ch)
                self.advance()

        logger.debug("tokenize %r -> %s", self.text, self.tokens)
        return self.tokens


def tokenize(text, registry=None):
    return Tokenizer(text, registry).tokenize()
