"""Domain errors surfaced to API callers."""

from __future__ import annotations


class NotFoundError(LookupError):
  """A requested record does not exist."""


class ClusterNotFoundError(NotFoundError):
  def __init__(self, cluster_id: str) -> None:
    super().__init__(f"Cluster {cluster_id} not found.")
    self.cluster_id = cluster_id


class PostNotFoundError(NotFoundError):
  def __init__(self, post_id: str) -> None:
    super().__init__(f"Blog post {post_id} not found.")
    self.post_id = post_id


class ClusterStateError(RuntimeError):
  """The cluster is not in the status an operation requires."""

  def __init__(self, cluster_id: str, *, expected: str, actual: str | None) -> None:
    super().__init__(f"Cluster {cluster_id} must be '{expected}' but is '{actual}'.")
    self.cluster_id = cluster_id
    self.expected = expected
    self.actual = actual


class ClusterGenerationError(RuntimeError):
  """Batch-level fault that stops a run before or between items."""


class TranslationConflictError(RuntimeError):
  """The post is already in the target language or has a translation into it."""

  def __init__(self, post_id: str, language: str, message: str) -> None:
    super().__init__(message)
    self.post_id = post_id
    self.language = language
