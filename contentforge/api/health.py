"""Health check endpoint."""

from fastapi import APIRouter, Depends

from contentforge.api.pipeline import get_config_store, get_module_manager
from contentforge.api.schemas import HealthResponse
from contentforge.modules.module_manager import ModuleManager
from contentforge.services.config_loader import ConfigStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(
    manager: ModuleManager = Depends(get_module_manager),
    store: ConfigStore = Depends(get_config_store),
) -> HealthResponse:
    """Return pipeline health: ok once content discovery has finished."""
    return HealthResponse(
        status="ok" if store.is_initialized else "starting",
        modules=len(manager.modules),
        documents=sum(store.counts().values()),
    )
