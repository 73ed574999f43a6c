from shared.database.postgres import (
    Base,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "get_async_engine",
    "get_async_session_factory",
]
