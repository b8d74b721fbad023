# Memory CLI - Vault Module
#
# Encrypted storage of secret entry content, kept apart from the entry
# metadata. scrypt key derivation + AES-256-CBC per record.

from .encryption import EncryptionService
from .secret_vault import SecretVault

__all__ = ["EncryptionService", "SecretVault"]
