"""
environment.py — Variable bindings for evaluation
==================================================
"""


class Environment:
    """Maps variable names to float values for one evaluation call chain."""

    def __init__(self, values=None):
        self._values = {}
        if values:
            for name, value in dict(values).items():
                self.set(name, value)

    def get(self, name):
        """Return the bound value, or None when ``name`` is unbound."""
        return self._values.get(name)

    def set(self, name, value):
        self._values[name] = float(value)

    def copy(self):
        return Environment(self._values)

    def names(self):
        return set(self._values)

    def __contains__(self, name):
        return name in self._values

    def __repr__(self):
        return f"Environment({self._values!r})"
