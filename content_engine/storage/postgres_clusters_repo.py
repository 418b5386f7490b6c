"""Postgres-backed cluster store using SQLAlchemy."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from content_engine.clusters.models import ClusterRecord, ClusterStatus, stage_plan_from_json, stage_plan_to_json
from content_engine.core.database import get_session_factory
from content_engine.schema.content import ContentCluster
from content_engine.storage.clusters_repo import ClusterStore


class PostgresClusterStore(ClusterStore):
  """Persist clusters and their progress maps to Postgres."""

  def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
    self._session_factory = session_factory or get_session_factory()
    if self._session_factory is None:
      raise RuntimeError("Database not initialized")

  async def create_cluster(self, record: ClusterRecord) -> None:
    async with self._session_factory() as session:
      row = ContentCluster(
        id=record.cluster_id,
        topic=record.topic,
        primary_keyword=record.primary_keyword,
        target_audience=record.target_audience,
        language=record.language,
        article_count=record.article_count,
        stage_plan=stage_plan_to_json(record.stage_plan),
        progress=dict(record.progress),
        status=record.status,
        created_by=record.created_by,
      )
      session.add(row)
      await session.commit()

  async def get_cluster(self, cluster_id: str) -> ClusterRecord | None:
    async with self._session_factory() as session:
      row = await session.get(ContentCluster, cluster_id)
      if row is None:
        return None
      return self._model_to_record(row)

  async def list_clusters(self, *, limit: int = 50) -> list[ClusterRecord]:
    async with self._session_factory() as session:
      stmt = select(ContentCluster).order_by(ContentCluster.created_at.desc()).limit(limit)
      result = await session.execute(stmt)
      return [self._model_to_record(row) for row in result.scalars().all()]

  async def update_cluster(self, cluster_id: str, *, status: ClusterStatus | None = None, progress: dict[str, str] | None = None) -> ClusterRecord | None:
    async with self._session_factory() as session:
      row = await session.get(ContentCluster, cluster_id)
      if row is None:
        return None
      if status is not None:
        row.status = status
      if progress is not None:
        # Assign a fresh dict so the JSON column is flagged dirty.
        row.progress = dict(progress)
      await session.commit()
      return self._model_to_record(row)

  async def transition_status(self, cluster_id: str, *, expected: ClusterStatus, target: ClusterStatus) -> ClusterRecord | None:
    stmt = (
      update(ContentCluster)
      .where(ContentCluster.id == cluster_id, ContentCluster.status == expected)
      .values(status=target, updated_at=func.now())
      .returning(ContentCluster)
      .execution_options(synchronize_session=False)
    )
    async with self._session_factory() as session:
      result = await session.execute(stmt)
      row = result.scalar_one_or_none()
      await session.commit()
      if row is None:
        return None
      return self._model_to_record(row)

  @staticmethod
  def _model_to_record(row: ContentCluster) -> ClusterRecord:
    return ClusterRecord(
      cluster_id=row.id,
      topic=row.topic,
      primary_keyword=row.primary_keyword,
      target_audience=row.target_audience,
      stage_plan=stage_plan_from_json(row.stage_plan),
      status=row.status,  # type: ignore[arg-type]
      progress=dict(row.progress or {}),
      language=row.language,
      created_by=row.created_by,
      created_at=row.created_at,
      updated_at=row.updated_at,
    )
