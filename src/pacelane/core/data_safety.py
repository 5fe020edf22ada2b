import base64
import hashlib
import os
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .logging_config import get_logger

logger = get_logger(__name__)


# ============================================================================
# ENCRYPTION OF PERSONAL DATA
# ============================================================================
class DataEncryption:
    """Encrypts personal contact data (emails, WhatsApp numbers) stored in the profile tables"""

    def __init__(self):
        self.master_key = self._get_or_create_master_key()
        self.fernet = Fernet(self.master_key)

    def _get_or_create_master_key(self):
        """Get master encryption key from environment or derive one"""
        key_env = os.environ.get('ENCRYPTION_MASTER_KEY')
        if key_env:
            return key_env.encode()

        password = os.environ.get('ENCRYPTION_PASSWORD', 'default-change-in-production')
        salt = os.environ.get('ENCRYPTION_SALT', 'default-salt-change-in-production').encode()

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=100000,
        )
        return base64.urlsafe_b64encode(kdf.derive(password.encode()))

    def encrypt_sensitive_data(self, data: Optional[str]) -> Optional[str]:
        """Encrypt sensitive data like email or phone number"""
        if not data:
            return data
        return self.fernet.encrypt(data.encode()).decode()

    def decrypt_sensitive_data(self, encrypted_data: Optional[str]) -> Optional[str]:
        """Decrypt sensitive data. Returns None when the token cannot be read with the current key."""
        if not encrypted_data:
            return encrypted_data
        try:
            return self.fernet.decrypt(encrypted_data.encode()).decode()
        except InvalidToken:
            logger.error("Could not decrypt stored value; encryption key may have changed")
            return None

    def hash_for_lookup(self, data: str) -> str:
        """Create one-way hash for lookups (cannot be reversed)"""
        if not data:
            return data
        return hashlib.sha256(f"{data}_{os.environ.get('HASH_SALT', 'default-salt')}".encode()).hexdigest()
