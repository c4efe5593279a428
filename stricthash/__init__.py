# StrictHash
# Schema-declared records with a closed key set

"""
Core invariant: an instance's key set is exactly the attribute set declared
on its type. Reading or writing any other key is a hard error.

This package exposes the StrictHash base type, its declaration protocol,
and the EvaluationOptions record built on top of it.
"""

from .normalize import is_truthy, normalize_key
from .options import EvaluationOptions
from .record import NoSuchPredicateError, StrictHash, UnknownKeyError
from .schema import (
    MISSING,
    AttributeSpec,
    DeclarationNotPermittedError,
    Declarations,
    FactoryDefault,
    InvalidDeclarationError,
    Schema,
    SharedDefault,
)

__all__ = [
    "MISSING",
    "AttributeSpec",
    "DeclarationNotPermittedError",
    "Declarations",
    "EvaluationOptions",
    "FactoryDefault",
    "InvalidDeclarationError",
    "NoSuchPredicateError",
    "Schema",
    "SharedDefault",
    "StrictHash",
    "UnknownKeyError",
    "is_truthy",
    "normalize_key",
]
