from passlib.context import CryptContext

context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return context.verify(plain, hashed)


def normalize_email(email: str) -> str:
    """Canonical form used for storage and lookups."""
    return email.strip().lower()


def split_display_name(name: str | None, fallback: str) -> tuple[str, str]:
    """Split a display name into (first, last); the first word is the first name."""
    parts = (name or "").split()
    if not parts:
        return fallback, ""
    return parts[0], " ".join(parts[1:])
