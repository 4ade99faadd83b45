from app.config import Settings
from shared.auth.dependencies import get_viewer, get_viewer_required


def get_settings() -> Settings:
    return Settings()


__all__ = ["get_settings", "get_viewer", "get_viewer_required"]
