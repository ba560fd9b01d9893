"""
Field scanner - discovers declarations on a test class.

Visiting order:
1. Lexically enclosing classes, outermost first (recovered from __qualname__)
2. Within each class, the MRO from the most general ancestor to the class itself

An attribute re-declared by a subclass shadows the ancestor's declaration.
Declarations assigned after class creation take the attribute name they are
found under.
"""

import sys
from typing import Any, Optional

from dbseed.errors import ConfigurationError
from dbseed.markers import Declaration, MarkerKind


def enclosing_class(cls: type) -> Optional[type]:
    """
    Return the class lexically enclosing cls, or None.

    Classes defined inside functions have no enclosing class.
    """
    parts = cls.__qualname__.split(".")
    if len(parts) < 2 or "<locals>" in parts:
        return None
    module = sys.modules.get(cls.__module__)
    target = module
    for part in parts[:-1]:
        target = getattr(target, part, None)
        if target is None:
            return None
    return target if isinstance(target, type) else None


def enclosing_chain(cls: type) -> list[type]:
    """Return [outermost, ..., cls]."""
    chain = [cls]
    outer = enclosing_class(cls)
    while outer is not None:
        chain.insert(0, outer)
        outer = enclosing_class(outer)
    return chain


def _declaration(klass: type, name: str, value: Any) -> Optional[Declaration]:
    if isinstance(value, (staticmethod, classmethod)) and isinstance(value.__func__, Declaration):
        raise ConfigurationError(
            f"{klass.__qualname__}.{name}: @{value.__func__.marker.kind.value} must be the outermost "
            f"decorator, found under @{type(value).__name__}"
        )
    if not isinstance(value, Declaration):
        return None
    if value.owner is None:
        # assigned after class creation, so __set_name__ never ran
        value.__set_name__(klass, name)
    return value


def _declarations_top_down(cls: type, kind: MarkerKind) -> list[Declaration]:
    hierarchy = [c for c in reversed(cls.__mro__) if c is not object]
    found: list[Declaration] = []
    for i, klass in enumerate(hierarchy):
        shadowing = hierarchy[i + 1:]
        for name, value in vars(klass).items():
            declaration = _declaration(klass, name, value)
            if declaration is None or declaration.marker.kind != kind:
                continue
            if any(name in vars(sub) for sub in shadowing):
                continue
            found.append(declaration)
    return found


def find_declarations(cls: type, kind: MarkerKind) -> list[Declaration]:
    """
    Find every declaration of one kind visible from cls.

    Returns:
        Declarations in visiting order; empty when none is declared
    """
    found: list[Declaration] = []
    for klass in enclosing_chain(cls):
        for declaration in _declarations_top_down(klass, kind):
            # an inner class may also inherit from its enclosing class
            if not any(declaration is seen for seen in found):
                found.append(declaration)
    return found
