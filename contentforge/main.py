"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from contentforge.api.health import router as health_router
from contentforge.api.pipeline import router as pipeline_router
from contentforge.config import Settings, settings
from contentforge.core.content.generators import GeneratorContext
from contentforge.core.logging import get_logger, setup_logging
from contentforge.modules.host import TypeMapsModule, build_host, register_host
from contentforge.modules.module_manager import ModuleManager
from contentforge.services.config_loader import ConfigStore, allocate_content_slots
from contentforge.services.object_loader import ObjectLoader

setup_logging(settings.LOG_LEVEL, settings.SCHEMA_LOG_FILE)
logger = get_logger(__name__)


def build_pipeline(config: Settings) -> tuple[ModuleManager, ConfigStore, ObjectLoader]:
    """콘텐츠 탐색 -> 슬롯 할당 -> 로더 구독 -> 호스트 모듈 등록"""
    store = ConfigStore()
    store.load_directory(config.CONTENT_ROOT)

    type_maps = TypeMapsModule()
    allocate_content_slots(type_maps, store, config.DEFINITION_NAMESPACE)

    manager = ModuleManager()
    loader = ObjectLoader(
        manager,
        store,
        context=GeneratorContext(manager, namespace=config.DEFINITION_NAMESPACE),
        disabled_kinds=config.DISABLED_KINDS,
    )
    loader.init()

    # 모듈이 하나씩 등록될 때마다 로더가 재평가한다
    register_host(manager, build_host(type_maps, day_length=config.DAY_LENGTH))
    return manager, store, loader


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Initializing content pipeline...")
    manager, store, loader = build_pipeline(settings)
    app.state.module_manager = manager
    app.state.config_store = store
    app.state.object_loader = loader
    logger.info(
        f"Content pipeline initialized ({loader.diagnostics.error_count} errors)."
    )

    yield

    logger.info("Shutting down...")
    manager.event_bus.clear()


app = FastAPI(title="Content Forge", lifespan=lifespan)

app.include_router(health_router)
app.include_router(pipeline_router)
