"""
Dependencias comunes para FastAPI:
- current_store (cliente del archivo en GitHub)
- current_service (ConfessionService por request)
"""
from fastapi import Depends
from ..core.config import settings
from ..db.github_store import GitHubContentStore
from ..db.store import get_store
from ..services.confession_service import ConfessionService


def current_store() -> GitHubContentStore:
    return get_store()


def current_service(store: GitHubContentStore = Depends(current_store)) -> ConfessionService:
    return ConfessionService(store, write_attempts=settings.STORE_WRITE_ATTEMPTS)
