"""Every ORM model of the marketplace service, imported in one place for metadata."""
from app.auth.models import User
from app.cart.models import CartItem
from app.catalog.models import Service

__all__ = [
    "User",
    "Service",
    "CartItem",
]
