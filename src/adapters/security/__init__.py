"""Security adapters - password hashing and session tokens."""

from .bcrypt_hasher import BcryptPasswordHasher
from .jwt_tokens import JwtSessionTokens

__all__ = ["BcryptPasswordHasher", "JwtSessionTokens"]
