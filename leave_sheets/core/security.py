import logging
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def is_password_hash(value: str) -> bool:
    """True when the stored value is a hash this context understands."""
    if not value:
        return False
    return pwd_context.identify(value) is not None


def verify_password(plain_password: str, stored_password: str) -> bool:
    """
    Check a password against the value stored in the Users sheet.

    Sheets written before hashing was introduced hold the password in
    plaintext; those are compared directly so the caller can re-hash them.
    """
    if not stored_password:
        return False
    if is_password_hash(stored_password):
        return pwd_context.verify(plain_password, stored_password)
    logger.warning("Verifying a legacy plaintext password")
    return plain_password == stored_password


def needs_rehash(stored_password: str) -> bool:
    if not is_password_hash(stored_password):
        return True
    return pwd_context.needs_update(stored_password)
