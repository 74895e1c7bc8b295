"""Seed-based symmetric encryption compatible with the existing encrypted data.

Envelopes are ``hex(iv):hex(ciphertext)`` using AES-256-CBC with PKCS7
padding. The key is a single SHA-256 pass over the seed (no salt, no
iterations); switching to a real KDF would break every stored envelope.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from typing import Optional

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..config.settings import get_settings

IV_SIZE = 16
KEY_SIZE = 32
_BLOCK_BITS = algorithms.AES.block_size


class CipherError(Exception):
    """Raised when encryption or decryption fails."""


@dataclass(frozen=True)
class CipherEnvelope:
    """Parsed ``iv:ciphertext`` pair."""

    iv: bytes
    ciphertext: bytes

    def __str__(self) -> str:
        return f"{self.iv.hex()}:{self.ciphertext.hex()}"

    @classmethod
    def parse(cls, text: str) -> "CipherEnvelope":
        if not isinstance(text, str) or ":" not in text:
            raise CipherError("Invalid envelope: expected 'iv:ciphertext'.")
        iv_hex, ciphertext_hex = text.split(":", 1)
        try:
            iv = bytes.fromhex(iv_hex)
            ciphertext = bytes.fromhex(ciphertext_hex)
        except ValueError as exc:
            raise CipherError(f"Invalid envelope: {exc}") from exc
        if len(iv) != IV_SIZE:
            raise CipherError(f"Invalid envelope: IV must be {IV_SIZE} bytes, got {len(iv)}.")
        if not ciphertext or len(ciphertext) % IV_SIZE:
            raise CipherError("Invalid envelope: ciphertext length is not a multiple of the block size.")
        return cls(iv=iv, ciphertext=ciphertext)


def derive_key(seed: str) -> bytes:
    if not isinstance(seed, str) or not seed:
        raise CipherError("A non-empty seed is required.")
    return hashlib.sha256(seed.encode("utf-8")).digest()


def encrypt(plaintext: str, seed: str) -> str:
    if not isinstance(plaintext, str):
        raise CipherError("Plaintext must be a string.")
    key = derive_key(seed)
    iv = secrets.token_bytes(IV_SIZE)

    padder = padding.PKCS7(_BLOCK_BITS).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return str(CipherEnvelope(iv=iv, ciphertext=ciphertext))


def decrypt(envelope: str, seed: str) -> str:
    parsed = CipherEnvelope.parse(envelope)
    key = derive_key(seed)

    decryptor = Cipher(algorithms.AES(key), modes.CBC(parsed.iv)).decryptor()
    padded = decryptor.update(parsed.ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
    try:
        data = unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise CipherError(f"Decryption failed: {exc}") from exc
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CipherError(f"Decryption failed: {exc}") from exc


class SeedCipher:
    """Binds a seed so callers can encrypt/decrypt without passing it around.

    The seed comes from settings (ONEPAGER_CIPHER_SEED) when not given explicitly.
    """

    ENV_KEY = "ONEPAGER_CIPHER_SEED"

    def __init__(self, seed: Optional[str] = None) -> None:
        seed = seed if seed is not None else get_settings().cipher_seed
        if not seed:
            raise CipherError(f"{self.ENV_KEY} is required for encryption.")
        self._key = derive_key(seed)
        self._seed = seed

    @property
    def key(self) -> bytes:
        return self._key

    def encrypt(self, plaintext: str) -> str:
        return encrypt(plaintext, self._seed)

    def decrypt(self, envelope: str) -> str:
        return decrypt(envelope, self._seed)
