"""Core entity access: shared context and the public facade."""

from .context import EntityContext
from .facade import EntityFacade

__all__ = ["EntityContext", "EntityFacade"]
