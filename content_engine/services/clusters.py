import logging

from fastapi import BackgroundTasks, HTTPException, status

from content_engine.ai.providers.base import AIModel
from content_engine.api.models import ClusterGenerationResponse, ClusterItemResponse, ClusterResponse, CreateClusterRequest, StagePlanEntry
from content_engine.clusters.models import DEFAULT_STAGE_PLAN, STAGE_DESCRIPTIONS, ClusterRecord, StageSpec, validate_stage_plan
from content_engine.clusters.orchestrator import ClusterGenerationResult, ClusterOrchestrator, PreparedBatch
from content_engine.clusters.pipeline import ItemPipeline
from content_engine.config import Settings
from content_engine.core.errors import ClusterGenerationError, ClusterNotFoundError
from content_engine.storage.clusters_repo import ClusterStore
from content_engine.storage.content_repo import ContentStore, SettingsProvider
from content_engine.utils.ids import generate_cluster_id

logger = logging.getLogger(__name__)


def build_orchestrator(settings: Settings, *, cluster_store: ClusterStore, settings_provider: SettingsProvider, content_store: ContentStore, generator: AIModel) -> ClusterOrchestrator:
  """Wire the orchestrator with the configured pacing delay."""
  pipeline = ItemPipeline(generator=generator, content_store=content_store)
  return ClusterOrchestrator(cluster_store=cluster_store, settings_provider=settings_provider, pipeline=pipeline, pacing_delay_seconds=settings.pacing_delay_seconds)


def _record_to_response(record: ClusterRecord) -> ClusterResponse:
  return ClusterResponse(
    id=record.cluster_id,
    topic=record.topic,
    primary_keyword=record.primary_keyword,
    target_audience=record.target_audience,
    language=record.language,
    status=record.status,
    article_count=record.article_count,
    stage_plan=[StagePlanEntry(stage=stage.label, count=stage.count, description=stage.description) for stage in record.stage_plan],
    progress=dict(record.progress),
    created_by=record.created_by,
    created_at=record.created_at,
    updated_at=record.updated_at,
  )


def _result_to_response(result: ClusterGenerationResult) -> ClusterGenerationResponse:
  return ClusterGenerationResponse(cluster_id=result.cluster_id, success=result.success, status=result.status, progress=result.progress, failures=result.failures)


def _plan_from_request(request: CreateClusterRequest, settings: Settings) -> tuple[StageSpec, ...]:
  if request.stage_plan is None:
    return validate_stage_plan(DEFAULT_STAGE_PLAN, max_items=settings.max_cluster_items)

  plan = [StageSpec(label=entry.stage, count=entry.count, description=entry.description or STAGE_DESCRIPTIONS[entry.stage]) for entry in request.stage_plan]
  try:
    return validate_stage_plan(plan, max_items=settings.max_cluster_items)
  except ValueError as exc:
    raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


async def create_cluster(request: CreateClusterRequest, settings: Settings, store: ClusterStore) -> ClusterResponse:
  """Create a draft cluster; generation is started separately."""
  plan = _plan_from_request(request, settings)
  record = ClusterRecord(
    cluster_id=generate_cluster_id(),
    topic=request.topic,
    primary_keyword=request.primary_keyword,
    target_audience=request.target_audience,
    stage_plan=plan,
    status="draft",
    progress={},
    language=request.language,
    created_by=request.created_by,
  )
  await store.create_cluster(record)
  logger.info("Created cluster %s topic=%r items=%s", record.cluster_id, record.topic, record.article_count)
  stored = await store.get_cluster(record.cluster_id)
  return _record_to_response(stored or record)


async def get_cluster(cluster_id: str, store: ClusterStore) -> ClusterResponse:
  record = await store.get_cluster(cluster_id)
  if record is None:
    raise ClusterNotFoundError(cluster_id)
  return _record_to_response(record)


async def list_clusters(store: ClusterStore, *, limit: int = 50) -> list[ClusterResponse]:
  return [_record_to_response(record) for record in await store.list_clusters(limit=limit)]


async def list_cluster_items(cluster_id: str, cluster_store: ClusterStore, content_store: ContentStore) -> list[ClusterItemResponse]:
  """Return the posts generated for a cluster via their group back-reference."""
  if await cluster_store.get_cluster(cluster_id) is None:
    raise ClusterNotFoundError(cluster_id)
  posts = await content_store.list_posts_for_cluster(cluster_id)
  return [ClusterItemResponse(id=post.id, title=post.title, slug=post.slug, funnel_stage=post.funnel_stage, status=post.status, reading_time=post.reading_time) for post in posts]


async def start_generation(cluster_id: str, orchestrator: ClusterOrchestrator, background_tasks: BackgroundTasks, *, background: bool = False, retry_failed: bool = False) -> ClusterGenerationResponse:
  """Claim the cluster, then either run the batch inline or hand it to a background task."""
  batch = await orchestrator.begin(cluster_id, retry_failed=retry_failed)

  if background:
    background_tasks.add_task(run_batch_in_background, orchestrator, batch)
    progress = dict(batch.cluster.progress) if retry_failed else {}
    return ClusterGenerationResponse(cluster_id=cluster_id, success=True, status="generating", progress=progress)

  result = await orchestrator.execute(batch)
  return _result_to_response(result)


async def run_batch_in_background(orchestrator: ClusterOrchestrator, batch: PreparedBatch) -> None:
  """Run a claimed batch after the response has been sent."""
  try:
    await orchestrator.execute(batch)
  except (ClusterGenerationError, ClusterNotFoundError):
    # Nobody is awaiting this task; the log is the only place the failure can surface.
    logger.error("Background generation for cluster %s aborted", batch.cluster.cluster_id, exc_info=True)
