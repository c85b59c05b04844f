from datetime import datetime, timedelta, timezone
import hashlib
import secrets

from passlib.context import CryptContext
from jose import jwt, JWTError
from sendiabete.core.config import Settings, settings as default_settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=default_settings.bcrypt_rounds,
)

# unambiguous characters only, the secret is read out / typed by hand
SECRET_ALPHABET = "abcdefghjkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SECRET_LENGTH = 12

def configure_hashing(settings: Settings) -> None:
    # create_app() may run with settings other than the module defaults
    pwd_context.update(bcrypt__rounds=settings.bcrypt_rounds)

def _bcrypt_input(password: str) -> str:
    """
    Bcrypt has a 72-byte input limit.
    We pre-hash with SHA-256 to make the input fixed-length and safe,
    then bcrypt the hex digest (64 chars ASCII).
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()

def hash_password(password: str) -> str:
    return pwd_context.hash(_bcrypt_input(password))

def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(_bcrypt_input(password), password_hash)
    except ValueError:
        # malformed / foreign hash in storage
        return False

def dummy_verify() -> None:
    pwd_context.dummy_verify()

def generate_secret(length: int = SECRET_LENGTH) -> str:
    """One-time account secret, drawn from the OS CSPRNG."""
    return "".join(secrets.choice(SECRET_ALPHABET) for _ in range(length))

def create_access_token(subject: str, extra: dict | None = None, settings: Settings | None = None) -> str:
    settings = settings or default_settings
    # subject = the account id
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=settings.jwt_access_ttl_min)
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()), # issued at
        "exp": int(exp.timestamp()), # expiration time
    }
    if extra:
        payload.update(extra)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)

def decode_token(token: str, settings: Settings | None = None) -> dict:
    settings = settings or default_settings
    # Returns the token payload if valid, raises JWTError if invalid
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])

__all__ = [
    "JWTError",
    "configure_hashing",
    "create_access_token",
    "decode_token",
    "dummy_verify",
    "generate_secret",
    "hash_password",
    "verify_password",
]
