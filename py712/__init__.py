"""EIP-712 typed structured data hashing.

Modules:
- typed_data: schema records and the type-name grammar
- registry: struct type registry
- type_hasher: type signatures and type hashes
- encoder: field encoding and struct hashing
- domain: domain separators
- engine: facade wiring the above from a Config
"""

from .config import Config
from .domain import EIP712_DOMAIN, DomainSeparator
from .encoder import InvalidValueError, MissingFieldError, ValueEncoder
from .engine import TypedDataEngine
from .registry import (
    DuplicateFieldError,
    RegistryFrozenError,
    TypedDataError,
    TypeRegistry,
    UnknownTypeError,
)
from .type_hasher import TypeHasher
from .typed_data import DomainContext, FieldDefinition, StructTypeDefinition

__all__ = [
    "EIP712_DOMAIN",
    "Config",
    "DomainContext",
    "DomainSeparator",
    "DuplicateFieldError",
    "FieldDefinition",
    "InvalidValueError",
    "MissingFieldError",
    "RegistryFrozenError",
    "StructTypeDefinition",
    "TypeHasher",
    "TypeRegistry",
    "TypedDataEngine",
    "TypedDataError",
    "UnknownTypeError",
    "ValueEncoder",
]
