"""Blog CMS backend: posts, categories and subcategories."""
