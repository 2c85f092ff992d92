from blogcms.configs.settings import (
    MAX_CATEGORY_NAME_LENGTH,
    MAX_META_DESCRIPTION_LENGTH,
    MAX_TAGS_COUNT,
    MAX_TITLE_LENGTH,
    Settings,
    settings,
)

__all__ = [
    "MAX_CATEGORY_NAME_LENGTH",
    "MAX_META_DESCRIPTION_LENGTH",
    "MAX_TAGS_COUNT",
    "MAX_TITLE_LENGTH",
    "Settings",
    "settings",
]
