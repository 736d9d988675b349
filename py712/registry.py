"""Registry of named EIP-712 struct types."""

import logging
import threading
from collections.abc import Iterable, Mapping, Sequence

from .typed_data import (
    EIP712_DOMAIN_TYPE,
    FieldDefinition,
    StructTypeDefinition,
    base_type,
    is_primitive,
)

logger = logging.getLogger(__name__)


class TypedDataError(Exception):
    """Base class for typed data hashing errors."""

    def __init__(
        self, message: str, type_name: str | None = None, field_name: str | None = None
    ) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.field_name = field_name


class UnknownTypeError(TypedDataError):
    """A type name is neither a primitive nor a registered struct."""

    def __init__(self, type_name: str, referenced_by: str | None = None) -> None:
        message = f"Unknown type: {type_name}"
        if referenced_by is not None:
            message += f" (referenced by {referenced_by})"
        super().__init__(message, type_name=type_name)
        self.referenced_by = referenced_by


class DuplicateFieldError(TypedDataError):
    """A struct definition declares the same field name twice."""

    def __init__(self, type_name: str, field_name: str) -> None:
        super().__init__(
            f"Duplicate field {field_name!r} in type {type_name}",
            type_name=type_name,
            field_name=field_name,
        )


class RegistryFrozenError(TypedDataError):
    """The registry was modified after hashing started."""

    pass


class TypeRegistry:
    """Holds struct type definitions by name.

    The registry follows a freeze-then-read lifecycle: definitions are
    registered up front, then ``freeze()`` validates every reference and
    makes the registry read-only so it can be shared across threads. The
    type hasher freezes the registry on first use.
    """

    def __init__(self, definitions: Iterable[StructTypeDefinition] = ()) -> None:
        self._types: dict[str, StructTypeDefinition] = {}
        self._frozen = False
        self._lock = threading.RLock()
        for definition in definitions:
            self.register(definition)

    @classmethod
    def from_types(
        cls, types: Mapping[str, Sequence[FieldDefinition | Mapping[str, str]]]
    ) -> "TypeRegistry":
        """Create a registry from an ethers-style ``{name: [fields...]}`` mapping."""
        registry = cls()
        registry.register_many(types)
        return registry

    @property
    def frozen(self) -> bool:
        """Return whether the registry is read-only."""
        return self._frozen

    def register(self, definition: StructTypeDefinition) -> None:
        """Insert or replace a struct definition.

        Raises:
            DuplicateFieldError: If the definition repeats a field name
            RegistryFrozenError: If the registry is frozen

        """
        seen: set[str] = set()
        for field in definition.fields:
            if field.name in seen:
                raise DuplicateFieldError(definition.name, field.name)
            seen.add(field.name)

        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(
                    f"Cannot register {definition.name}: registry is frozen",
                    type_name=definition.name,
                )
            if definition.name in self._types:
                logger.debug(f"Replacing type definition: {definition.name}")
            self._types[definition.name] = definition

    def register_many(
        self,
        types: Mapping[str, Sequence[FieldDefinition | Mapping[str, str]]]
        | Iterable[StructTypeDefinition],
    ) -> None:
        """Register several definitions at once."""
        if isinstance(types, Mapping):
            definitions = [
                StructTypeDefinition.from_fields(name, fields) for name, fields in types.items()
            ]
        else:
            definitions = list(types)
        for definition in definitions:
            self.register(definition)

    def resolve(self, type_name: str) -> StructTypeDefinition | None:
        """Resolve a type name to its struct definition.

        Array suffixes are stripped before lookup.

        Returns:
            The struct definition, or None if the base type is a primitive

        Raises:
            UnknownTypeError: If the base type is neither registered nor primitive

        """
        name = base_type(type_name)
        definition = self._types.get(name)
        if definition is not None:
            return definition
        if is_primitive(name):
            return None
        raise UnknownTypeError(name)

    def dependencies_of(self, type_name: str) -> set[str]:
        """Return every struct type transitively referenced by a type.

        The root type itself is not included, even when it references itself.

        Raises:
            UnknownTypeError: If any referenced type is unknown

        """
        root = base_type(type_name)
        root_definition = self.resolve(root)
        if root_definition is None:
            return set()

        found: set[str] = set()
        pending = [root_definition]
        while pending:
            definition = pending.pop()
            for field in definition.fields:
                try:
                    child = self.resolve(field.type)
                except UnknownTypeError as e:
                    raise UnknownTypeError(e.type_name or field.type, definition.name) from e
                if child is None or child.name == root or child.name in found:
                    continue
                found.add(child.name)
                pending.append(child)
        return found

    def validate(self) -> None:
        """Check that every field type resolves.

        Raises:
            UnknownTypeError: For the first dangling reference

        """
        for definition in list(self._types.values()):
            for field in definition.fields:
                try:
                    self.resolve(field.type)
                except UnknownTypeError as e:
                    raise UnknownTypeError(e.type_name or field.type, definition.name) from e

    def freeze(self) -> None:
        """Validate the registry and make it read-only."""
        with self._lock:
            if self._frozen:
                return
            self.validate()
            self._frozen = True
        logger.info(f"Type registry frozen with {len(self._types)} types")

    def primary_type(self) -> str:
        """Infer the primary type: the only struct no other struct references.

        Raises:
            UnknownTypeError: If there is no unique candidate

        """
        referenced: set[str] = set()
        for definition in self._types.values():
            for field in definition.fields:
                referenced.add(base_type(field.type))
        candidates = [
            name
            for name in self._types
            if name not in referenced and name != EIP712_DOMAIN_TYPE
        ]
        if len(candidates) != 1:
            raise UnknownTypeError(
                f"<primary type> (candidates: {', '.join(sorted(candidates)) or 'none'})"
            )
        return candidates[0]

    def names(self) -> list[str]:
        """Return the registered type names."""
        return list(self._types)

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and type_name in self._types

    def __len__(self) -> int:
        return len(self._types)
