"""EIP-712 domain separator computation."""

import logging
import threading
from collections import OrderedDict

from .encoder import ValueEncoder
from .metrics import DOMAIN_HASHES_TOTAL
from .registry import TypeRegistry
from .type_hasher import TypeHasher
from .typed_data import (
    EIP712_DOMAIN_TYPE,
    DomainContext,
    FieldDefinition,
    StructTypeDefinition,
)

logger = logging.getLogger(__name__)

# EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)
EIP712_DOMAIN = StructTypeDefinition(
    name=EIP712_DOMAIN_TYPE,
    fields=(
        FieldDefinition(name="name", type="string"),
        FieldDefinition(name="version", type="string"),
        FieldDefinition(name="chainId", type="uint256"),
        FieldDefinition(name="verifyingContract", type="address"),
    ),
)


class DomainSeparator:
    """Computes domain separators for signing contexts.

    Results are memoized per context value in a bounded LRU cache;
    ``cache_size=0`` disables memoization.
    """

    def __init__(self, cache_size: int = 128) -> None:
        if cache_size < 0:
            raise ValueError(f"cache_size must be non-negative, got {cache_size}")
        registry = TypeRegistry([EIP712_DOMAIN])
        self._encoder = ValueEncoder(TypeHasher(registry))
        self._cache_size = cache_size
        self._cache: OrderedDict[DomainContext, bytes] = OrderedDict()
        self._lock = threading.Lock()

    def domain_hash(self, context: DomainContext) -> bytes:
        """Return the struct hash of the EIP712Domain type applied to the context.

        Raises:
            InvalidValueError: If a context field cannot be encoded

        """
        if self._cache_size:
            with self._lock:
                cached = self._cache.get(context)
                if cached is not None:
                    self._cache.move_to_end(context)
                    DOMAIN_HASHES_TOTAL.labels(cache="hit").inc()
                    return cached

        digest = self._encoder.struct_hash(EIP712_DOMAIN_TYPE, context.as_message())
        DOMAIN_HASHES_TOTAL.labels(cache="miss").inc()
        logger.debug(
            f"Computed domain separator for {context.name} v{context.version} "
            f"on chain {context.chain_id}: 0x{digest.hex()}"
        )

        if self._cache_size:
            with self._lock:
                self._cache[context] = digest
                if len(self._cache) > self._cache_size:
                    self._cache.popitem(last=False)
        return digest
