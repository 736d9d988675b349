"""Typed data hashing orchestration."""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from .config import Config
from .domain import DomainSeparator
from .encoder import InvalidValueError, MissingFieldError, ValueEncoder
from .metrics import ENCODING_ERRORS_TOTAL
from .registry import (
    DuplicateFieldError,
    RegistryFrozenError,
    TypedDataError,
    TypeRegistry,
    UnknownTypeError,
)
from .type_hasher import TypeHasher
from .typed_data import DomainContext, FieldDefinition, StructTypeDefinition
from .types import DomainHashHex, EncodedHex, StructHashHex, TypeHashHex

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ERROR_TYPES: dict[type[TypedDataError], str] = {
    UnknownTypeError: "unknown_type",
    DuplicateFieldError: "duplicate_field",
    RegistryFrozenError: "registry_frozen",
    MissingFieldError: "missing_field",
    InvalidValueError: "invalid_value",
}


def _hex(data: bytes) -> str:
    return "0x" + data.hex()


class TypedDataEngine:
    """Hashes typed data against a fixed set of struct types.

    The engine owns a frozen registry, so a single instance can be shared
    across threads.
    """

    def __init__(
        self,
        types: Mapping[str, Sequence[FieldDefinition | Mapping[str, str]]]
        | Iterable[StructTypeDefinition]
        | TypeRegistry,
        config: Config | None = None,
    ) -> None:
        self._config = config or Config()
        if isinstance(types, TypeRegistry):
            self._registry = types
        else:
            self._registry = TypeRegistry()
            self._call(lambda: self._registry.register_many(types))
        self._call(self._registry.freeze)

        self._type_hasher = TypeHasher(
            self._registry, cache_enabled=self._config.cache_type_hashes
        )
        self._encoder = ValueEncoder(self._type_hasher)
        self._domain_separator = DomainSeparator(cache_size=self._config.domain_cache_size)
        logger.info(f"Typed data engine ready with types: {', '.join(self._registry.names())}")

    @property
    def config(self) -> Config:
        return self._config

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    def _call(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except TypedDataError as e:
            ENCODING_ERRORS_TOTAL.labels(error_type=_ERROR_TYPES.get(type(e), "other")).inc()
            logger.debug(f"Typed data error: {e}")
            raise

    def primary_type(self) -> str:
        """Return the struct type no other type references."""
        return self._call(self._registry.primary_type)

    def type_signature(self, type_name: str) -> str:
        return self._call(lambda: self._type_hasher.type_signature(type_name))

    def type_hash(self, type_name: str) -> bytes:
        return self._call(lambda: self._type_hasher.type_hash(type_name))

    def struct_hash(self, type_name: str, value: Any) -> bytes:
        return self._call(lambda: self._encoder.struct_hash(type_name, value))

    def encode_array(self, type_name: str, values: Sequence[Any]) -> bytes:
        return self._call(lambda: self._encoder.encode_array(type_name, values))

    def encode_data(self, type_name: str, value: Any) -> bytes:
        return self._call(lambda: self._encoder.encode_data(type_name, value))

    def domain_hash(self, context: DomainContext | Mapping[str, Any]) -> bytes:
        """Compute the domain separator for a context or its JSON shape."""
        if not isinstance(context, DomainContext):
            context = DomainContext.from_dict(context)
        return self._call(lambda: self._domain_separator.domain_hash(context))

    # Hex helpers for callers that print or transmit results

    def type_hash_hex(self, type_name: str) -> TypeHashHex:
        return TypeHashHex(_hex(self.type_hash(type_name)))

    def struct_hash_hex(self, type_name: str, value: Any) -> StructHashHex:
        return StructHashHex(_hex(self.struct_hash(type_name, value)))

    def encode_array_hex(self, type_name: str, values: Sequence[Any]) -> EncodedHex:
        return EncodedHex(_hex(self.encode_array(type_name, values)))

    def encode_data_hex(self, type_name: str, value: Any) -> EncodedHex:
        return EncodedHex(_hex(self.encode_data(type_name, value)))

    def domain_hash_hex(self, context: DomainContext | Mapping[str, Any]) -> DomainHashHex:
        return DomainHashHex(_hex(self.domain_hash(context)))
