import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from content_engine.api.deps import get_cluster_store, get_content_store, get_orchestrator
from content_engine.api.models import ClusterGenerationResponse, ClusterItemResponse, ClusterResponse, CreateClusterRequest
from content_engine.clusters.orchestrator import ClusterOrchestrator
from content_engine.config import Settings, get_settings
from content_engine.core.security import require_admin_token
from content_engine.services import clusters as cluster_service
from content_engine.storage.clusters_repo import ClusterStore
from content_engine.storage.content_repo import ContentStore

router = APIRouter(dependencies=[Depends(require_admin_token)])
logger = logging.getLogger("content_engine.api.routes.clusters")


@router.post("", response_model=ClusterResponse, status_code=status.HTTP_201_CREATED)
async def create_cluster(  # noqa: B008
  request: CreateClusterRequest,
  settings: Settings = Depends(get_settings),  # noqa: B008
  store: ClusterStore = Depends(get_cluster_store),  # noqa: B008
) -> ClusterResponse:
  """Create a draft cluster."""
  return await cluster_service.create_cluster(request, settings, store)


@router.get("", response_model=list[ClusterResponse])
async def list_clusters(  # noqa: B008
  limit: int = Query(default=50, ge=1, le=200),
  store: ClusterStore = Depends(get_cluster_store),  # noqa: B008
) -> list[ClusterResponse]:
  return await cluster_service.list_clusters(store, limit=limit)


@router.get("/{cluster_id}", response_model=ClusterResponse)
async def get_cluster(cluster_id: str, store: ClusterStore = Depends(get_cluster_store)) -> ClusterResponse:  # noqa: B008
  """Fetch a cluster with its progress map; used to poll background runs."""
  return await cluster_service.get_cluster(cluster_id, store)


@router.get("/{cluster_id}/items", response_model=list[ClusterItemResponse])
async def list_cluster_items(  # noqa: B008
  cluster_id: str,
  cluster_store: ClusterStore = Depends(get_cluster_store),  # noqa: B008
  content_store: ContentStore = Depends(get_content_store),  # noqa: B008
) -> list[ClusterItemResponse]:
  return await cluster_service.list_cluster_items(cluster_id, cluster_store, content_store)


@router.post("/{cluster_id}/generate", response_model=ClusterGenerationResponse)
async def generate_cluster(  # noqa: B008
  cluster_id: str,
  background_tasks: BackgroundTasks,
  background: bool = Query(default=False, description="Return once the cluster is claimed and generate in the background."),
  orchestrator: ClusterOrchestrator = Depends(get_orchestrator),  # noqa: B008
) -> ClusterGenerationResponse:
  """Generate every planned item of a draft cluster."""
  logger.info("Generation requested for cluster %s background=%s", cluster_id, background)
  return await cluster_service.start_generation(cluster_id, orchestrator, background_tasks, background=background)


@router.post("/{cluster_id}/retry", response_model=ClusterGenerationResponse)
async def retry_cluster(  # noqa: B008
  cluster_id: str,
  background_tasks: BackgroundTasks,
  background: bool = Query(default=False),
  orchestrator: ClusterOrchestrator = Depends(get_orchestrator),  # noqa: B008
) -> ClusterGenerationResponse:
  """Re-attempt only the failed items of a cluster in `error`."""
  logger.info("Retry requested for cluster %s background=%s", cluster_id, background)
  return await cluster_service.start_generation(cluster_id, orchestrator, background_tasks, background=background, retry_failed=True)
