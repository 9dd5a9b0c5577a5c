import logging
from sqlalchemy.types import TypeDecorator, Text
from cryptography.fernet import Fernet, InvalidToken

from config import DB_ENCRYPTION_KEY

logger = logging.getLogger(__name__)

_warned = False


class EncryptedString(TypeDecorator):
    """
    Encrypts free text (task descriptions, client notes) before it is written
    to the record store and decrypts it on load. Without a DB_ENCRYPTION_KEY
    the column stores plaintext.
    """
    impl = Text  # ciphertext is longer than the plaintext
    cache_ok = True

    def __init__(self, key=None, **kwargs):
        global _warned
        super().__init__(**kwargs)
        key = key or DB_ENCRYPTION_KEY
        if not key:
            if not _warned:
                logger.warning("No DB_ENCRYPTION_KEY set, encrypted columns store plaintext")
                _warned = True
            self.fernet = None
        else:
            self.fernet = Fernet(key)

    def process_bind_param(self, value, dialect):
        if value is not None and self.fernet:
            if isinstance(value, str):
                value = value.encode('utf-8')
            return self.fernet.encrypt(value).decode('utf-8')
        return value

    def process_result_value(self, value, dialect):
        if value is not None and self.fernet:
            try:
                return self.fernet.decrypt(value.encode('utf-8')).decode('utf-8')
            except InvalidToken:
                # Rows written before the key was configured are plaintext
                logger.debug("Returning undecryptable value as stored")
                return value
        return value
