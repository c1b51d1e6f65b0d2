# confession_board/db/store.py
from typing import Optional

from ..core.config import settings
from .github_store import GitHubContentStore

_store: Optional[GitHubContentStore] = None


def connect_store() -> GitHubContentStore:
    """
    Crea el cliente del almacén remoto (pool HTTP compartido).
    Se llama en startup (lifespan). No hace ninguna petición todavía.
    """
    global _store
    if _store:
        return _store
    _store = GitHubContentStore.from_settings(settings)
    return _store


async def disconnect_store() -> None:
    global _store
    if _store:
        await _store.aclose()
    _store = None


def get_store() -> GitHubContentStore:
    if _store is None:
        raise RuntimeError("Almacén no inicializado. Llama connect_store() en startup.")
    return _store
