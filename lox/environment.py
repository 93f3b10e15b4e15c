"""Lexically-scoped variable storage for the Interpreter.

Scopes are kept in an arena: frame i is self._frames[i] and its enclosing frame is self._parents[i] (None for the
global frame). Blocks nest strictly, so a frame is always released before its parent and the arena behaves like a
stack of handles. Lookups walk from the current frame outwards; a frame never copies its parent's bindings.
"""

from contextlib import contextmanager

from lox.lang.error import LoxRuntimeError


class Environment:
    """Chain of name: value frames."""
    GLOBAL = 0  # handle of the global frame, which is never released

    def __init__(self):
        self._frames = [{}]
        self._parents = [None]
        self.current = Environment.GLOBAL

    def define(self, name, value):
        """Binds name in the current frame. Redefining a name in the same frame overwrites it."""
        self._frames[self.current][name] = value

    def get(self, name):
        """Returns the value of the nearest binding of name (a Token)."""
        frame = self._resolve(name)
        return self._frames[frame][name.lexeme]

    def assign(self, name, value):
        """Overwrites the nearest existing binding of name (a Token). Never creates a binding."""
        frame = self._resolve(name)
        self._frames[frame][name.lexeme] = value

    def push(self):
        """Opens a frame enclosed by the current one, makes it current and returns its handle."""
        self._frames.append({})
        self._parents.append(self.current)
        self.current = len(self._frames) - 1
        return self.current

    def pop(self, handle):
        """Releases frame handle, which must be the innermost frame, and makes its parent current again."""
        if handle == Environment.GLOBAL or handle != len(self._frames) - 1:
            raise ValueError(f"frame {handle} is not the innermost block frame")

        self.current = self._parents[handle]
        del self._frames[handle]
        del self._parents[handle]

    @contextmanager
    def scope(self):
        """Runs the with block in a new frame. The frame is released however the block exits."""
        handle = self.push()
        try:
            yield handle
        finally:
            self.pop(handle)

    def _resolve(self, name):
        """Returns the handle of the innermost frame that binds name, raising an undefined variable error if none."""
        frame = self.current
        while frame is not None:
            if name.lexeme in self._frames[frame]:
                return frame
            frame = self._parents[frame]

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")
