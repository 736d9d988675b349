"""EIP-712 typed data definitions.

This module holds the schema records the hashing engine works on and the
type-name grammar shared by the registry, the type hasher and the encoder.
Schemas use the same JSON shape as ethers and eth_account:

    {"Person": [{"name": "name", "type": "string"}, ...], ...}

Reference: https://eips.ethereum.org/EIPS/eip-712
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

import msgspec

EIP712_DOMAIN_TYPE = "EIP712Domain"

_TYPE_NAME_RE = re.compile(r"^([A-Za-z_$][A-Za-z0-9_$]*)((?:\[[0-9]*\])*)$")
_ARRAY_SUFFIX_RE = re.compile(r"\[([0-9]*)\]$")
_INT_RE = re.compile(r"^u?int([0-9]+)$")
_FIXED_BYTES_RE = re.compile(r"^bytes([0-9]+)$")


class FieldDefinition(msgspec.Struct, frozen=True):
    """A single named, typed member of a struct type.

    Attributes:
        name: The field name
        type: The field type name, e.g. ``uint256``, ``Person`` or ``Person[]``

    """

    name: str
    type: str

    def __post_init__(self) -> None:
        parse_type_name(self.type)

    @property
    def signature(self) -> str:
        """Return the ``type name`` fragment used in type signatures."""
        return f"{self.type} {self.name}"


class StructTypeDefinition(msgspec.Struct, frozen=True):
    """A named struct type with an ordered list of fields.

    Field order is part of the type identity: the same fields declared in a
    different order produce a different type hash and struct hash.
    """

    name: str
    fields: tuple[FieldDefinition, ...] = ()

    @classmethod
    def from_fields(
        cls, name: str, fields: Iterable[FieldDefinition | Mapping[str, str]]
    ) -> "StructTypeDefinition":
        """Build a definition from field records or ``{"name", "type"}`` mappings.

        Raises:
            ValueError: If a field mapping is malformed

        """
        try:
            converted = tuple(
                f if isinstance(f, FieldDefinition) else msgspec.convert(f, FieldDefinition)
                for f in fields
            )
        except msgspec.ValidationError as e:
            raise ValueError(f"Invalid field in type {name}: {e}") from e
        return cls(name=name, fields=converted)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


class DomainContext(msgspec.Struct, frozen=True):
    """The verifying context a schema instance is bound to.

    Attributes:
        name: Human readable signing domain name
        version: Current major version of the signing domain
        chain_id: EIP-155 chain identifier
        verifying_contract: Address of the verifying contract (20 bytes, hex)

    """

    name: str
    version: str
    chain_id: int = msgspec.field(name="chainId")
    verifying_contract: str = msgspec.field(name="verifyingContract")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DomainContext":
        """Create a context from the ethers/JSON domain shape."""
        try:
            return msgspec.convert(data, cls)
        except msgspec.ValidationError as e:
            raise ValueError(f"Invalid domain context: {e}") from e

    def as_message(self) -> dict[str, Any]:
        """Return the context keyed by its EIP-712 field names."""
        return msgspec.to_builtins(self)  # type: ignore[no-any-return]


def parse_type_name(type_name: str) -> tuple[str, tuple[int | None, ...]]:
    """Split a type name into its base name and array dimensions.

    ``uint256[2][]`` yields ``("uint256", (2, None))``; ``None`` marks a
    dynamic dimension.

    Raises:
        ValueError: If the type name is malformed

    """
    match = _TYPE_NAME_RE.match(type_name)
    if match is None:
        raise ValueError(f"Malformed type name: {type_name!r}")
    base, suffixes = match.groups()
    dims = tuple(
        int(length) if length else None for length in re.findall(r"\[([0-9]*)\]", suffixes)
    )
    return base, dims


def base_type(type_name: str) -> str:
    """Return the type name with every array suffix stripped."""
    return parse_type_name(type_name)[0]


def split_array_type(type_name: str) -> tuple[str, int | None] | None:
    """Peel the outermost array dimension off a type name.

    Returns:
        ``(element_type, length)`` for array types, ``None`` otherwise

    """
    match = _ARRAY_SUFFIX_RE.search(type_name)
    if match is None:
        return None
    length = match.group(1)
    return type_name[: match.start()], int(length) if length else None


def is_primitive(type_name: str) -> bool:
    """Check whether a (non-array) type name is an EIP-712 atomic or dynamic primitive."""
    if type_name in ("address", "bool", "string", "bytes"):
        return True
    match = _INT_RE.match(type_name)
    if match:
        bits = int(match.group(1))
        return 8 <= bits <= 256 and bits % 8 == 0
    match = _FIXED_BYTES_RE.match(type_name)
    if match:
        return 1 <= int(match.group(1)) <= 32
    return False


def fixed_bytes_length(type_name: str) -> int | None:
    """Return N for ``bytesN`` types, ``None`` for anything else."""
    match = _FIXED_BYTES_RE.match(type_name)
    return int(match.group(1)) if match else None


# JSON decoder for ethers-style type schemas
types_decoder = msgspec.json.Decoder(dict[str, list[FieldDefinition]])


def decode_types(data: bytes | str) -> list[StructTypeDefinition]:
    """Decode an ethers-style JSON schema into struct definitions.

    Args:
        data: JSON object mapping type names to field lists

    Returns:
        The struct definitions, in document order

    Raises:
        ValueError: If the document does not match the schema shape

    """
    try:
        types = types_decoder.decode(data)
    except msgspec.DecodeError as e:
        raise ValueError(f"Invalid type schema: {e}") from e
    return [StructTypeDefinition(name=name, fields=tuple(fields)) for name, fields in types.items()]
