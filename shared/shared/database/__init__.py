from shared.database.postgres import Base, TenantScopedMixin, get_async_session_factory

__all__ = [
    "Base",
    "TenantScopedMixin",
    "get_async_session_factory",
]
