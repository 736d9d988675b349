"""Type definitions for py712.

This module contains NewType definitions for the hex strings handed to
callers at the boundary of the engine.
"""

from typing import NewType

TypeHashHex = NewType("TypeHashHex", str)
"""0x-prefixed keccak256 of a type signature (66 characters)."""

StructHashHex = NewType("StructHashHex", str)
"""0x-prefixed struct hash (66 characters)."""

DomainHashHex = NewType("DomainHashHex", str)
"""0x-prefixed domain separator (66 characters)."""

EncodedHex = NewType("EncodedHex", str)
"""0x-prefixed variable-length encoding, e.g. a concatenated array encoding."""
