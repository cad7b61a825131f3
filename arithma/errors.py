"""
errors.py — Exception hierarchy for the arithma engine
=======================================================
Every failure raised by the engine derives from ArithmaError, which is a
ValueError so callers that already guard numeric input keep working.
"""


class ArithmaError(ValueError):
    """Base class for all engine errors."""


class ParseError(ArithmaError):
    """Structurally invalid input: mismatched brackets, stray tokens, …"""


class ArityError(ArithmaError):
    """A function received the wrong number of arguments."""


class UndefinedVariableError(ArithmaError):
    """A variable was evaluated without a binding in the environment."""

    def __init__(self, name):
        super().__init__(f"Variable '{name}' is not defined")
        self.name = name


class DomainError(ArithmaError):
    """A hard math-domain violation (e.g. square root of a negative)."""


class EvaluationError(ArithmaError):
    """The expression has no numeric value (unknown function, no branch, …)."""


class UnsupportedOperationError(ArithmaError):
    """A symbolic pass has no rule for the given expression shape."""


class CompositionError(ArithmaError):
    """Function composition is malformed or references unavailable variables."""
