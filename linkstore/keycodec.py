"""Key encoding for link identifiers.

An identifier is written as a zig-zag signed varint (the shortest byte
string that round-trips the value) and the bytes are then rendered with the
URL-safe base64 alphabet, without padding. Small identifiers give short keys:
1 -> "Ag", 63 -> "fg", 64 -> "gAE".
"""

import base64
import binascii
import re

from .errors import InvalidKeyError


MAX_ID = 2 ** 63 - 1

# A 63-bit value shifted left by one needs at most ten 7-bit groups
MAX_VARINT_BYTES = 10


class KeyCodec:
    """Bijective mapping between link identifiers and URL-safe keys."""

    ALPHABET_RE = re.compile(r"[A-Za-z0-9_-]+")

    def encode(self, link_id: int) -> str:
        """Encode an identifier as a key.

        Args:
            link_id: Identifier in the range [0, 2**63 - 1]

        Returns:
            URL-safe key without padding

        Raises:
            ValueError: If the identifier is not an int in range
        """
        if isinstance(link_id, bool) or not isinstance(link_id, int):
            raise ValueError(f"Identifier must be an int, got {type(link_id).__name__}")
        if link_id < 0 or link_id > MAX_ID:
            raise ValueError(f"Identifier out of range: {link_id}")

        raw = self._put_varint(link_id)
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    def decode(self, key: str) -> int:
        """Decode a key back into its identifier.

        The alphabet is checked before any byte decoding so that keys which
        could address backend metadata never get further than this call.

        Args:
            key: Key produced by encode

        Returns:
            The identifier

        Raises:
            InvalidKeyError: If the key is not the canonical encoding of an
                identifier in range
        """
        if not isinstance(key, str) or not self.ALPHABET_RE.fullmatch(key):
            raise InvalidKeyError(f"Key contains characters outside the key alphabet: {key!r}")

        padded = key + "=" * (-len(key) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded)
        except (binascii.Error, ValueError) as e:
            raise InvalidKeyError(f"Key is not valid base64: {key!r}") from e

        link_id = self._read_varint(raw, key)

        # Trailing base64 bits are ignored by the decoder; only the canonical
        # spelling is accepted so that each identifier has exactly one key.
        if self.encode(link_id) != key:
            raise InvalidKeyError(f"Key is not in canonical form: {key!r}")

        return link_id

    @staticmethod
    def _put_varint(value: int) -> bytes:
        zigzag = value << 1
        out = bytearray()
        while zigzag >= 0x80:
            out.append((zigzag & 0x7F) | 0x80)
            zigzag >>= 7
        out.append(zigzag)
        return bytes(out)

    @staticmethod
    def _read_varint(raw: bytes, key: str) -> int:
        if not raw or len(raw) > MAX_VARINT_BYTES:
            raise InvalidKeyError(f"Key has an invalid length: {key!r}")

        zigzag = 0
        shift = 0
        for index, byte in enumerate(raw):
            zigzag |= (byte & 0x7F) << shift
            shift += 7
            if byte < 0x80:
                if index != len(raw) - 1:
                    raise InvalidKeyError(f"Key has trailing bytes: {key!r}")
                break
        else:
            raise InvalidKeyError(f"Key ends inside a varint: {key!r}")

        if zigzag & 1:
            raise InvalidKeyError(f"Key encodes a negative identifier: {key!r}")

        value = zigzag >> 1
        if value > MAX_ID:
            raise InvalidKeyError(f"Key encodes an identifier out of range: {key!r}")
        return value
