from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHash, VerificationError

# argon2id : hachage "memory-hard", sel aléatoire généré à chaque appel
_hasher = PasswordHasher(type=Type.ID)


def hash_password(password: str) -> str:
    """Retourne la chaîne PHC argon2id (algo + paramètres + sel + hash)."""
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """True si `password` correspond au hash ; False sinon (jamais d'exception)."""
    try:
        return _hasher.verify(hashed, password)
    except (InvalidHash, VerificationError):
        return False
