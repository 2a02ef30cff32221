"""Chained variable scopes used to resolve ``@name`` references."""

from __future__ import annotations

from carto.model.value import NIL, Value

__all__ = ["Environment", "StyleEnv"]


def _key(name: str) -> str:
    return name[1:] if name.startswith("@") else name


class Environment:
    """A frame of variable bindings with an optional parent frame.

    ``define`` only ever writes to the local frame, shadowing any binding of
    the same name further up the chain.  Child frames hold a reference to
    their parent rather than a copy, so a parent must not be redefined into
    once children are reading through it.
    """

    def __init__(
        self,
        parent: Environment | None = None,
        bindings: dict[str, Value] | None = None,
    ) -> None:
        self.parent = parent
        self._vars: dict[str, Value] = {}
        for name, value in (bindings or {}).items():
            self.define(name, value)

    # --- read / write ---------------------------------------------------------

    def define(self, name: str, value: Value) -> None:
        """Bind *name* in this frame, overwriting a local binding if present."""
        self._vars[_key(name)] = value

    def lookup(self, name: str) -> Value:
        """Return the nearest binding for *name*, or ``NIL`` if there is none."""
        frame = self.find(name)
        if frame is None:
            return NIL
        return frame._vars[_key(name)]

    def find(self, name: str) -> Environment | None:
        """Return the frame that binds *name*, searching up the parent chain."""
        key = _key(name)
        frame: Environment | None = self
        while frame is not None:
            if key in frame._vars:
                return frame
            frame = frame.parent
        return None

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    # --- scoping --------------------------------------------------------------

    def child(self) -> Environment:
        """Return a new, empty frame whose parent is this one."""
        return Environment(parent=self)

    @property
    def depth(self) -> int:
        """Number of ancestors above this frame."""
        depth = 0
        frame = self.parent
        while frame is not None:
            depth += 1
            frame = frame.parent
        return depth

    def names(self) -> list[str]:
        """Return every visible variable name, nearest frame first."""
        seen: dict[str, None] = {}
        frame: Environment | None = self
        while frame is not None:
            for name in frame._vars:
                seen.setdefault(name, None)
            frame = frame.parent
        return list(seen)

    def __repr__(self) -> str:
        return f"Environment(vars={list(self._vars)}, depth={self.depth})"


StyleEnv = Environment
