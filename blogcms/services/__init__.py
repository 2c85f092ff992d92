from blogcms.services.media import MediaService
from blogcms.services.post import PostService
from blogcms.services.projection import project_sub_categories

__all__ = ["MediaService", "PostService", "project_sub_categories"]
