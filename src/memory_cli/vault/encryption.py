# Memory CLI - Encryption Service
#
# Per-entry password encryption for secret snippets.
# Password + random salt -> 256-bit key (scrypt)
# Content encryption (AES-256-CBC, PKCS7 padding)
#
# Wire format (vault.json): salt_hex:iv_hex:ciphertext_hex
# No authentication tag: CBC gives confidentiality only, tampered
# ciphertext may decrypt to garbage without detection.

import logging
import os
from typing import Optional, Tuple

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from cryptography.hazmat.backends import default_backend

from ..errors import MalformedVaultBlobError

logger = logging.getLogger(__name__)


class EncryptionService:
    """
    Encrypts and decrypts a single text blob under a user-supplied password.

    Flow:
    1. Fresh 128-bit salt and 128-bit IV for every encryption
    2. scrypt derives a 256-bit key from password + salt
    3. AES-256-CBC encrypts the UTF-8 plaintext
    4. salt, IV and ciphertext are hex-encoded and joined with ':'
    """

    # scrypt parameters (N=2^14, r=8, p=1 is the classic interactive cost)
    SCRYPT_N = 2 ** 14
    SCRYPT_R = 8
    SCRYPT_P = 1
    KEY_LENGTH = 32  # 256 bits for AES-256
    SALT_LENGTH = 16  # 128-bit salt
    IV_LENGTH = 16  # AES block size
    SEPARATOR = ":"

    @staticmethod
    def derive_key(password: str, salt: bytes) -> bytes:
        """
        Derive encryption key from password using scrypt.

        Args:
            password: Password supplied for this entry
            salt: Random salt (stored in the blob)

        Returns:
            256-bit encryption key
        """
        kdf = Scrypt(
            salt=salt,
            length=EncryptionService.KEY_LENGTH,
            n=EncryptionService.SCRYPT_N,
            r=EncryptionService.SCRYPT_R,
            p=EncryptionService.SCRYPT_P,
            backend=default_backend()
        )
        return kdf.derive(password.encode('utf-8'))

    @staticmethod
    def encrypt(plaintext: str, password: str) -> str:
        """
        Encrypt plaintext into a self-contained ciphertext blob.

        Repeated calls with the same input never produce the same blob.

        Returns:
            "salt_hex:iv_hex:ciphertext_hex"
        """
        salt = os.urandom(EncryptionService.SALT_LENGTH)
        key = EncryptionService.derive_key(password, salt)
        iv = os.urandom(EncryptionService.IV_LENGTH)

        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(plaintext.encode('utf-8')) + padder.finalize()

        encryptor = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend()).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return EncryptionService.SEPARATOR.join((salt.hex(), iv.hex(), ciphertext.hex()))

    @staticmethod
    def split_blob(blob: str) -> Tuple[bytes, bytes, bytes]:
        """
        Split and hex-decode a ciphertext blob.

        Raises:
            MalformedVaultBlobError: Not exactly three hex fields, wrong salt/IV
                length, or ciphertext not a whole number of AES blocks.
        """
        if not isinstance(blob, str):
            raise MalformedVaultBlobError("Vault record is not a string")

        parts = blob.split(EncryptionService.SEPARATOR)
        if len(parts) != 3:
            raise MalformedVaultBlobError(
                f"Vault record must have 3 fields, got {len(parts)}"
            )

        try:
            salt, iv, ciphertext = (bytes.fromhex(part) for part in parts)
        except ValueError:
            raise MalformedVaultBlobError("Vault record is not hex-encoded")

        if len(salt) != EncryptionService.SALT_LENGTH or len(iv) != EncryptionService.IV_LENGTH:
            raise MalformedVaultBlobError("Vault record has invalid salt or IV length")

        block_bytes = algorithms.AES.block_size // 8
        if not ciphertext or len(ciphertext) % block_bytes:
            raise MalformedVaultBlobError("Vault record ciphertext is not block aligned")

        return salt, iv, ciphertext

    @staticmethod
    def is_well_formed(blob: Optional[str]) -> bool:
        """Check the blob shape without deriving a key."""
        try:
            EncryptionService.split_blob(blob)
        except MalformedVaultBlobError:
            return False
        return True

    @staticmethod
    def decrypt(blob: str, password: str) -> Optional[str]:
        """
        Decrypt a ciphertext blob.

        Returns:
            Decrypted plaintext, or None if the blob is malformed, the password
            is wrong or the data is corrupt. Callers cannot tell these apart.
        """
        try:
            salt, iv, ciphertext = EncryptionService.split_blob(blob)
        except MalformedVaultBlobError as e:
            logger.debug(f"Refusing to decrypt malformed blob: {e}")
            return None

        key = EncryptionService.derive_key(password, salt)
        decryptor = Cipher(algorithms.AES(key), modes.CBC(iv), backend=default_backend()).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        try:
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
            return plaintext.decode('utf-8')
        except (ValueError, UnicodeDecodeError):
            # Wrong key almost always shows up as bad padding
            return None
