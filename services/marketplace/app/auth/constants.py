import enum

from shared.constants import Role

# ── Roles a user may pick for themselves (registration / first Google sign-in) ─
SELF_SERVICE_ROLES: frozenset[Role] = frozenset({Role.TRAVELER, Role.SERVICE_PROVIDER})


# ── How a user can authenticate ───────────────────────────────────────────────
class AuthProvider(str, enum.Enum):
    EMAIL = "email"     # password only
    GOOGLE = "google"   # Google Sign-In only
    BOTH = "both"       # password and Google linked on one account


# ── Expected outcomes of the account resolver ─────────────────────────────────
class AuthErrorCode(str, enum.Enum):
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    ROLE_NOT_ALLOWED = "ROLE_NOT_ALLOWED"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    ACCOUNT_CONFLICT = "ACCOUNT_CONFLICT"  # email already bound to another Google identity
