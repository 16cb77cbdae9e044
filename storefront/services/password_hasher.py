"""bcrypt password hashing."""

import bcrypt

from ..domain.errors import ValidationError

MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Hash and check passwords with bcrypt."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        encoded = self._encode(password)
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True when ``password`` matches; malformed hashes never match."""
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError:
            return False

    @staticmethod
    def _encode(password: str) -> bytes:
        encoded = password.encode("utf-8")
        # bcrypt only looks at the first 72 bytes
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return encoded
