"""Field resolution registry."""

from logship.fields.registry import FieldRegistry, LogOccurrence, Resolver

__all__ = [
    "FieldRegistry",
    "LogOccurrence",
    "Resolver",
]
