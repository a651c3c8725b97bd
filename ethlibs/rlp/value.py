"""RLP values: hex strings or lists of values, with their encoding and hash."""

from __future__ import annotations

import binascii
from dataclasses import dataclass, field

from Crypto.Hash import keccak


def _unprefixed_hex(n: int) -> str:
    """Big-endian hex of ``n`` with no leading zero bytes; zero gives ''."""
    if n == 0:
        return ""
    return n.to_bytes((n.bit_length() + 7) // 8, "big").hex()


@dataclass
class Value:
    """A decoded RLP value.

    ``string`` holds a 0x-prefixed hex string; when it is empty the value is
    the list held in ``items``.
    """

    string: str = ""
    items: list[Value] = field(default_factory=list)

    def is_list(self) -> bool:
        return self.string == ""

    def is_string(self) -> bool:
        return self.string != ""

    def encode(self) -> str:
        """Return the 0x-prefixed hex RLP encoding of the value."""
        if self.is_string():
            return self._encode_string()
        return self._encode_list()

    def _encode_string(self) -> str:
        if not self.string.startswith("0x"):
            raise ValueError("invalid string value before encoding")
        digits = self.string[2:]
        try:
            data = binascii.unhexlify(digits)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"could not decode string value: {exc}") from exc

        if len(data) == 1 and data[0] <= 0x7F:
            return self.string
        if len(data) < 56:
            return "0x" + _unprefixed_hex(0x80 + len(data)) + digits
        size = _unprefixed_hex(len(data))
        return "0x" + _unprefixed_hex(0xB7 + len(size) // 2) + size + digits

    def _encode_list(self) -> str:
        if not self.items:
            return "0xc0"
        parts = []
        for item in self.items:
            try:
                encoded = item.encode()
            except ValueError as exc:
                raise ValueError(f"could not encode child item: {exc}") from exc
            parts.append(encoded[2:])
        body = "".join(parts)
        body_size = len(body) // 2
        if body_size < 56:
            return "0x" + _unprefixed_hex(body_size + 0xC0) + body
        size = _unprefixed_hex(body_size)
        return "0x" + _unprefixed_hex(len(size) // 2 + 0xF7) + size + body

    def hash_bytes(self) -> bytes:
        """Return the keccak256 digest of the encoded value."""
        try:
            encoded = self.encode()
        except ValueError as exc:
            raise ValueError(f"could not encode RLP value: {exc}") from exc
        digits = encoded.lower().replace("0x", "", 1)
        try:
            data = binascii.unhexlify(digits)
        except (binascii.Error, ValueError) as exc:
            raise ValueError(f"could not convert encoded to bytes: {exc}") from exc
        digest = keccak.new(digest_bits=256)
        digest.update(data)
        return digest.digest()

    def hash(self) -> str:
        """Return the keccak256 digest of the encoded value as 0x-prefixed hex."""
        return "0x" + self.hash_bytes().hex()