"""Domain layer package exposing pure business abstractions."""

from . import entities
from . import interfaces
from . import repositories
from .value_objects import Principal, PrincipalRole, RecruiterContext, SchoolType

__all__ = [
    "entities",
    "interfaces",
    "repositories",
    "Principal",
    "PrincipalRole",
    "RecruiterContext",
    "SchoolType",
]
