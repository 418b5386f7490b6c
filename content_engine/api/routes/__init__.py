from . import citations, clusters, linking, posts

__all__ = ["citations", "clusters", "linking", "posts"]
