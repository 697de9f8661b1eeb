"""Password hashing with bcrypt."""

import bcrypt

# bcrypt only reads this many bytes of input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    encoded = password.encode()
    if len(encoded) > MAX_PASSWORD_BYTES:
        msg = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        raise ValueError(msg)
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of ``password`` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed stored hash, or a password bcrypt refuses
        return False
