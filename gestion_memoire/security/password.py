from passlib.context import CryptContext

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return PWD_CTX.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Compare un mot de passe en clair au hash stocké (False si hash illisible)."""
    try:
        return PWD_CTX.verify(password, hashed_password)
    except ValueError:
        return False
