from shared.models.user import Viewer

__all__ = ["Viewer"]
