"""EIP-712 type signatures and type hashes."""

import logging
import threading

from eth_utils import keccak

from .metrics import TYPE_HASH_REQUESTS_TOTAL
from .registry import TypeRegistry, UnknownTypeError
from .typed_data import StructTypeDefinition, base_type

logger = logging.getLogger(__name__)


def _encode_definition(definition: StructTypeDefinition) -> str:
    """Render ``Name(type1 name1,type2 name2,...)`` in declared field order."""
    members = ",".join(field.signature for field in definition.fields)
    return f"{definition.name}({members})"


class TypeHasher:
    """Computes canonical type signatures and their keccak-256 hashes.

    Type hashes are memoized per type name. The registry is frozen on the
    first hash, so cached entries stay valid for the registry's lifetime.
    """

    def __init__(self, registry: TypeRegistry, cache_enabled: bool = True) -> None:
        self._registry = registry
        self._cache_enabled = cache_enabled
        self._cache: dict[str, bytes] = {}
        self._lock = threading.Lock()

    @property
    def registry(self) -> TypeRegistry:
        """Return the registry this hasher reads from."""
        return self._registry

    @property
    def cache_size(self) -> int:
        """Return the number of memoized type hashes."""
        return len(self._cache)

    def type_signature(self, type_name: str) -> str:
        """Return the canonical signature of a struct type.

        The root definition comes first, followed by every referenced struct
        type sorted by name.

        Raises:
            UnknownTypeError: If the type or any referenced type is unknown

        """
        name = base_type(type_name)
        definition = self._registry.resolve(name)
        if definition is None:
            raise UnknownTypeError(name)

        dependencies = sorted(self._registry.dependencies_of(name))
        parts = [_encode_definition(definition)]
        for dependency in dependencies:
            child = self._registry.resolve(dependency)
            assert child is not None
            parts.append(_encode_definition(child))
        return "".join(parts)

    def type_hash(self, type_name: str) -> bytes:
        """Return keccak256 of the UTF-8 type signature."""
        name = base_type(type_name)
        if self._cache_enabled:
            cached = self._cache.get(name)
            if cached is not None:
                TYPE_HASH_REQUESTS_TOTAL.labels(cache="hit").inc()
                return cached

        self._registry.freeze()
        signature = self.type_signature(name)
        digest = keccak(text=signature)
        TYPE_HASH_REQUESTS_TOTAL.labels(cache="miss").inc()
        logger.debug(f"Computed type hash for {signature}: 0x{digest.hex()}")

        if self._cache_enabled:
            with self._lock:
                self._cache.setdefault(name, digest)
        return digest

    def clear_cache(self) -> None:
        """Discard every memoized type hash."""
        with self._lock:
            self._cache.clear()
