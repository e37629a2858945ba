from bookmarks_api.models.bookmark import Bookmark

__all__ = ["Bookmark"]
