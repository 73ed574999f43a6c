"""
Marketplace — domain-specific HTTP exceptions.

All exceptions use preset status codes, detail messages and a machine-readable
code so that callers never need to specify these at the call site.  The shared
exception handlers render them in the standard error envelope:

    {"error": {"code": "...", "message": "..."}, "request_id": "..."}
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    code: str = "HTTP_ERROR"

    def __init__(self, status_code: int, detail: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


# ── Authentication ────────────────────────────────────────────────────────────

class InvalidCredentials(DomainError):
    code = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
        )


class InvalidGoogleToken(DomainError):
    code = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Google sign-in could not be verified.",
        )


class CurrentPasswordMismatch(DomainError):
    code = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect.",
        )


# ── Registration / conflict ───────────────────────────────────────────────────

class DuplicateEmail(DomainError):
    code = "DUPLICATE_EMAIL"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this email already exists.",
        )


class AccountConflict(DomainError):
    """The email is already bound to a different Google identity."""

    code = "ACCOUNT_CONFLICT"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="This email is linked to a different Google account.",
        )


class RoleNotAllowed(DomainError):
    code = "ROLE_NOT_ALLOWED"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Role must be 'traveler' or 'service_provider'.",
        )


# ── Account state ─────────────────────────────────────────────────────────────

class UnknownAccount(DomainError):
    """The token verified but its subject is no longer a user."""

    code = "UNAUTHORIZED"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )


class UserNotFound(DomainError):
    code = "USER_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found.",
        )


class UserInactive(DomainError):
    code = "ACCOUNT_INACTIVE"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account has been deactivated.",
        )


class UserAlreadyActive(DomainError):
    code = "USER_ALREADY_ACTIVE"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="This user is already active.",
        )


class UserAlreadyInactive(DomainError):
    code = "USER_ALREADY_INACTIVE"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="This user is already deactivated.",
        )


# ── Authorization ─────────────────────────────────────────────────────────────

class RoleModificationForbidden(DomainError):
    code = "ROLE_MODIFICATION_FORBIDDEN"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You cannot change your own role.",
        )


class AdminRequired(DomainError):
    code = "ADMIN_REQUIRED"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required.",
        )


class NotAccountOwner(DomainError):
    code = "FORBIDDEN"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify your own account.",
        )


class ProviderRequired(DomainError):
    code = "PROVIDER_REQUIRED"

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only service providers can publish services.",
        )


# ── Catalog / cart ────────────────────────────────────────────────────────────

class ServiceNotFound(DomainError):
    code = "SERVICE_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found.")


class CartItemNotFound(DomainError):
    code = "CART_ITEM_NOT_FOUND"

    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found.")
