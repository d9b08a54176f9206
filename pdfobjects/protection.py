"""Standard security handler (RC4, 40-bit) used to protect PDF documents."""

from __future__ import annotations

import hashlib
import secrets
from enum import IntFlag

__all__ = ["Permission", "PDFProtection", "rc4"]

_PADDING = bytes(
    [
        0x28, 0xBF, 0x4E, 0x5E, 0x4E, 0x75, 0x8A, 0x41,
        0x64, 0x00, 0x4E, 0x56, 0xFF, 0xFA, 0x01, 0x08,
        0x2E, 0x2E, 0x00, 0xB6, 0xD0, 0x68, 0x3E, 0x80,
        0x2F, 0x0C, 0xA9, 0xFE, 0x64, 0x53, 0x69, 0x7A,
    ]
)

_RANDOM_PASS_CHARS = "abcdef0123456789"
_RANDOM_PASS_LENGTH = 24


class Permission(IntFlag):
    """Permissions that can be granted to the user of a protected document."""

    PRINT = 4
    MODIFY = 8
    COPY = 16
    ANNOT_FORMS = 32


def rc4(key: bytes, data: bytes) -> bytes:
    """Encrypt (or decrypt) ``data`` with the RC4 stream cipher."""
    if not 1 <= len(key) <= 256:
        raise ValueError(f"invalid RC4 key size {len(key)}")
    state = list(range(256))
    j = 0
    key_len = len(key)
    for i in range(256):
        j = (j + state[i] + key[i % key_len]) & 0xFF
        state[i], state[j] = state[j], state[i]

    out = bytearray()
    i = j = 0
    for byte in data:
        i = (i + 1) & 0xFF
        j = (j + state[i]) & 0xFF
        state[i], state[j] = state[j], state[i]
        out.append(byte ^ state[(state[i] + state[j]) & 0xFF])
    return bytes(out)


def _as_bytes(value: bytes | str | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _padded(value: bytes) -> bytes:
    return (value + _PADDING)[:32]


class PDFProtection:
    """Holds the O, U and P entries and the document encryption key."""

    def __init__(self) -> None:
        self.o_value: bytes = b""
        self.u_value: bytes = b""
        self.p_value: int = 0
        self.encryption_key: bytes = b""

    def set_protection(
        self,
        permissions: int,
        user_pass: bytes | str | None = b"",
        owner_pass: bytes | str | None = None,
    ) -> None:
        """Compute the encryption values for the given permissions and passwords.

        An empty owner password is replaced by a random one.
        """
        protection = 192 | int(permissions)
        owner = _as_bytes(owner_pass)
        if not owner:
            owner = "".join(
                secrets.choice(_RANDOM_PASS_CHARS) for _ in range(_RANDOM_PASS_LENGTH)
            ).encode("ascii")
        user_padded = _padded(_as_bytes(user_pass))
        owner_padded = _padded(owner)

        owner_key = hashlib.md5(owner_padded).digest()[:5]
        self.o_value = rc4(owner_key, user_padded)

        digest = hashlib.md5()
        digest.update(user_padded)
        digest.update(self.o_value)
        digest.update(bytes([protection & 0xFF, 0xFF, 0xFF, 0xFF]))
        self.encryption_key = digest.digest()[:5]
        self.u_value = rc4(self.encryption_key, _PADDING)
        self.p_value = -((protection ^ 255) + 1)

    def object_key(self, obj_id: int) -> bytes:
        """Return the RC4 key for the object with the given number."""
        number = (obj_id & 0xFFFFFFFF).to_bytes(4, "little")
        material = self.encryption_key + number[:3] + b"\x00\x00"
        return hashlib.md5(material).digest()[:10]

    def encrypt(self, obj_id: int, data: bytes) -> bytes:
        """Encrypt ``data`` belonging to the object with the given number."""
        return rc4(self.object_key(obj_id), data)