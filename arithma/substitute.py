"""
substitute.py — Variable substitution and function composition
================================================================
Substitution is structural: every free occurrence of a variable is replaced
by a copy of the replacement tree.  A summation binds its index, so
substituting the index only touches the summation's bounds.
"""

from .errors import CompositionError
from .nodes import Summation, Variable, free_variables, map_children


def substitute_variable(node, name, replacement):
    """Replace every free ``Variable(name)`` in ``node`` with ``replacement``."""
    if isinstance(node, Variable):
        return replacement if node.name == name else node
    if isinstance(node, Summation):
        body = node.body
        if node.index != name:
            body = substitute_variable(body, name, replacement)
        return Summation(node.index,
                         substitute_variable(node.start, name, replacement),
                         substitute_variable(node.end, name, replacement),
                         body)
    return map_children(node, lambda child: substitute_variable(child, name, replacement))


def substitute(node, substitutions):
    """Apply ``(name, replacement)`` pairs in order.

    Each pair sees the result of the previous ones, so a replacement that
    mentions a later pair's variable is itself rewritten by that pair.
    """
    for name, replacement in substitutions:
        node = substitute_variable(node, name, replacement)
    return node


# ── Composition ─────────────────────────────────────────────

def compose(outer, outer_var, inner):
    """f(g): substitute ``inner`` for ``outer_var`` in ``outer``."""
    return substitute_variable(outer, outer_var, inner)


def compose_multiple(functions):
    """Compose ``[(h, var_h), (g, var_g), (f, var_f)]`` into f(g(h)).

    The first pair is innermost; every following function wraps the result
    through its own variable.
    """
    if not functions:
        raise CompositionError("compose_multiple needs at least one function")
    result = functions[0][0]
    for outer, outer_var in functions[1:]:
        result = compose(outer, outer_var, result)
    return result


def validate_composition(outer, outer_var, inner, available_vars):
    """Check that ``inner`` only uses ``outer_var`` or variables in ``available_vars``."""
    available = set(available_vars)
    for name in sorted(free_variables(inner)):
        if name != outer_var and name not in available:
            raise CompositionError(
                f"Variable '{name}' used in the inner function is not available"
            )
