"""
arithma — LaTeX math parser and symbolic engine
===============================================
"""

from .algebra import extract_variable, solve_equation, solve_for_variable
from .derivative import differentiate, partial_derivative
from .engine import (
    compose_latex, definite_integral_latex, differentiate_latex, evaluate_latex,
    integrate_latex, simplify_latex, substitute_latex,
)
from .environment import Environment
from .errors import (
    ArithmaError, ArityError, CompositionError, DomainError, EvaluationError,
    ParseError, UndefinedVariableError, UnsupportedOperationError,
)
from .evaluator import Evaluator, evaluate
from .functions import VARIADIC, FunctionRegistry, build_default_registry, default_registry
from .integration import definite_integral, integrate
from .nodes import to_latex
from .parser import build_expression_tree, parse, parse_latex
from .simplify import simplify
from .substitute import (
    compose, compose_multiple, substitute, substitute_variable, validate_composition,
)
from .sympy_bridge import sympy_latex, to_sympy
from .tokenizer import Tokenizer, tokenize

__version__ = '0.3.0'
