from src.api.generation_service import GenerationService
from src.core.config import ApiSettings
from fastapi import FastAPI
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from functools import lru_cache


@lru_cache(maxsize=1)
def get_generation_service() -> GenerationService:
    settings = ApiSettings.from_env()
    return GenerationService(settings)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        yield
    finally:
        # Only close what was actually built; shutdown must not create clients.
        if get_generation_service.cache_info().currsize:
            service = get_generation_service()
            await service.close()
            get_generation_service.cache_clear()
