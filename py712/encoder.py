"""EIP-712 value encoding and struct hashing.

Every field is encoded to a single 32-byte word:

- atomic primitives (``uintN``, ``intN``, ``address``, ``bool``, ``bytesN``)
  use their ABI encoding
- ``bytes`` and ``string`` are replaced by the keccak256 of their contents
- nested structs are replaced by their struct hash
- arrays are replaced by the keccak256 of the concatenated element words

Reference: https://eips.ethereum.org/EIPS/eip-712#definition-of-encodedata
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import msgspec
from eth_abi import encode
from eth_abi.exceptions import EncodingError
from eth_utils import decode_hex, keccak, to_canonical_address

from .metrics import STRUCT_HASHES_TOTAL
from .registry import TypedDataError
from .type_hasher import TypeHasher
from .typed_data import fixed_bytes_length, split_array_type

logger = logging.getLogger(__name__)


class MissingFieldError(TypedDataError):
    """A value does not supply a field its struct type declares."""

    def __init__(self, type_name: str, field_name: str, path: str | None = None) -> None:
        location = path or f"{type_name}.{field_name}"
        super().__init__(
            f"Missing field {field_name!r} for type {type_name} at {location}",
            type_name=type_name,
            field_name=field_name,
        )
        self.path = location


class InvalidValueError(TypedDataError):
    """A value cannot be encoded as its declared type."""

    def __init__(self, type_name: str, path: str, reason: str) -> None:
        super().__init__(
            f"Invalid {type_name} value at {path}: {reason}",
            type_name=type_name,
            field_name=path.rsplit(".", 1)[-1],
        )
        self.path = path
        self.reason = reason


def _parse_int(value: Any) -> Any:
    """Parse decimal or hex strings to int, leaving other values untouched."""
    if isinstance(value, str):
        return int(value, 16) if value.startswith(("0x", "0X")) else int(value)
    return value


def _parse_bytes(value: Any) -> bytes:
    """Parse a hex string or bytes-like value to bytes."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str) and value.startswith(("0x", "0X")):
        return decode_hex(value)
    raise TypeError(f"expected bytes or 0x-prefixed hex string, got {type(value).__name__}")


def _as_mapping(value: Any) -> Mapping[str, Any]:
    """View a struct value as a mapping keyed by EIP-712 field names."""
    if isinstance(value, Mapping):
        return value
    if isinstance(value, msgspec.Struct):
        return {f.encode_name: getattr(value, f.name) for f in msgspec.structs.fields(value)}
    raise TypeError(f"expected a mapping or msgspec.Struct, got {type(value).__name__}")


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


class ValueEncoder:
    """Encodes value trees against the struct types of a registry."""

    def __init__(self, type_hasher: TypeHasher) -> None:
        self._type_hasher = type_hasher
        self._registry = type_hasher.registry

    def encode_field(self, field_type: str, value: Any, path: str | None = None) -> bytes:
        """Encode a single value to its 32-byte word.

        Args:
            field_type: The declared type name of the value
            value: The value to encode
            path: Location of the value, used in error messages

        Returns:
            The 32-byte encoding

        Raises:
            UnknownTypeError: If the type is not known
            MissingFieldError: If a nested struct value is incomplete
            InvalidValueError: If the value does not fit its type

        """
        path = path or field_type

        array = split_array_type(field_type)
        if array is not None:
            element_type, length = array
            if not _is_sequence(value):
                raise InvalidValueError(field_type, path, "expected a sequence")
            if length is not None and len(value) != length:
                raise InvalidValueError(
                    field_type, path, f"expected {length} elements, got {len(value)}"
                )
            return keccak(self._encode_elements(element_type, value, path))

        definition = self._registry.resolve(field_type)
        if definition is not None:
            return self.struct_hash(field_type, value, path)

        if field_type == "string":
            if not isinstance(value, str):
                raise InvalidValueError(field_type, path, f"expected str, got {type(value).__name__}")
            return keccak(text=value)

        try:
            if field_type == "bytes":
                return keccak(_parse_bytes(value))
            if field_type == "address":
                value = to_canonical_address(value)
            elif field_type.startswith(("uint", "int")):
                value = _parse_int(value)
            elif (width := fixed_bytes_length(field_type)) is not None:
                value = _parse_bytes(value)
                if len(value) != width:
                    raise ValueError(f"expected {width} bytes, got {len(value)}")
            return encode([field_type], [value])
        except (EncodingError, TypeError, ValueError) as e:
            raise InvalidValueError(field_type, path, str(e)) from e

    def _encode_elements(self, element_type: str, values: Sequence[Any], path: str) -> bytes:
        return b"".join(
            self.encode_field(element_type, item, f"{path}[{i}]") for i, item in enumerate(values)
        )

    def struct_hash(self, type_name: str, value: Any, path: str | None = None) -> bytes:
        """Compute keccak256(typeHash || encodeData(value)) for a struct value.

        Fields are encoded in declaration order. Value keys the struct type
        does not declare are ignored.

        Raises:
            UnknownTypeError: If the type is unknown or not a struct
            MissingFieldError: If the value lacks a declared field

        """
        path = path or type_name
        type_hash = self._type_hasher.type_hash(type_name)
        definition = self._registry.resolve(type_name)
        assert definition is not None

        try:
            members = _as_mapping(value)
        except TypeError as e:
            raise InvalidValueError(type_name, path, str(e)) from e

        words = [type_hash]
        for field in definition.fields:
            if field.name not in members:
                raise MissingFieldError(type_name, field.name, f"{path}.{field.name}")
            words.append(self.encode_field(field.type, members[field.name], f"{path}.{field.name}"))

        if logger.isEnabledFor(logging.DEBUG):
            extra = set(members) - set(definition.field_names)
            if extra:
                logger.debug(f"Ignoring undeclared fields at {path}: {sorted(extra)}")

        STRUCT_HASHES_TOTAL.inc()
        return keccak(b"".join(words))

    def encode_array(self, type_name: str, values: Sequence[Any]) -> bytes:
        """Concatenate the struct hashes of every element, in order.

        The result carries no length prefix and is not hashed; callers that
        need a digest hash it themselves (or use ``encode_data``).
        """
        array = split_array_type(type_name)
        element_type = array[0] if array is not None else type_name
        if not _is_sequence(values):
            raise InvalidValueError(f"{element_type}[]", type_name, "expected a sequence")
        return b"".join(
            self.struct_hash(element_type, item, f"{element_type}[{i}]")
            for i, item in enumerate(values)
        )

    def encode_data(self, type_name: str, value: Any) -> bytes:
        """Return the 32-byte encoding of a value of any type.

        For struct types this is the struct hash, for array types the hash of
        the concatenated element encodings.
        """
        return self.encode_field(type_name, value)
