# confession_board/client/sync.py
"""
Capa de sincronización del cliente.
- load(): trae la lista del servicio; si falla, usa la caché local.
- submit(): publica; si falla, guarda solo en local (nunca se reintenta).
El estado vive en BoardSession (view-model), no en globales.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

import httpx
from pydantic import ValidationError as SchemaError

from ..core.config import settings
from ..core.errors import SubmissionInProgressError, ValidationError
from ..models.confession import (
    TEXT_REQUIRED,
    Confession,
    ConfessionList,
    new_confession_id,
    normalize_name,
    utc_timestamp,
)
from .format import parse_timestamp
from .local_cache import LocalCache

log = logging.getLogger("confession_board.client")

LOAD_FALLBACK_MSG = "Could not load confessions. Using local cache."
LOCAL_ONLY_MSG = "Confession saved locally. Server sync failed."
POSTED_MSG = "Your confession has been posted!"

Notify = Callable[[str, str], None]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _log_notify(message: str, level: str = "success") -> None:
    if level == "error":
        log.warning(message)
    else:
        log.info(message)


def sort_newest_first(confessions: list[Confession]) -> list[Confession]:
    return sorted(confessions, key=lambda c: parse_timestamp(c.timestamp) or _EPOCH, reverse=True)


@dataclass
class BoardSession:
    """Estado de la vista: colección en memoria + cursor de paginación."""
    page_size: int = 10
    confessions: list[Confession] = field(default_factory=list)
    displayed_count: int = 0
    submitting: bool = False

    @property
    def has_more(self) -> bool:
        return self.displayed_count < len(self.confessions)

    def next_page(self) -> list[Confession]:
        end = min(self.displayed_count + self.page_size, len(self.confessions))
        page = self.confessions[self.displayed_count:end]
        self.displayed_count = end
        return page

    def reset_display(self) -> None:
        self.displayed_count = 0


class ConfessionSyncClient:
    def __init__(
        self,
        endpoint: str,
        cache: LocalCache,
        *,
        session: Optional[BoardSession] = None,
        notify: Optional[Notify] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self.endpoint = endpoint
        self.cache = cache
        self.session = session or BoardSession(page_size=settings.CONFESSIONS_PER_PAGE)
        self.notify = notify or _log_notify
        self._client = httpx.AsyncClient(
            transport=transport,
            timeout=timeout_s if timeout_s is not None else settings.CLIENT_TIMEOUT_S,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ConfessionSyncClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def _fetch_remote(self) -> list[Confession]:
        r = await self._client.get(self.endpoint)
        if not r.is_success:
            raise httpx.HTTPStatusError(f"API error: {r.status_code}", request=r.request, response=r)
        data = r.json()
        return ConfessionList.validate_python(data.get("confessions") or [])

    async def load(self) -> list[Confession]:
        try:
            confessions = sort_newest_first(await self._fetch_remote())
        except (httpx.HTTPError, ValueError, AttributeError, TypeError, SchemaError) as e:
            log.error(f"Error loading confessions: {e}")
            confessions = self.cache.load() or []
            self.notify(LOAD_FALLBACK_MSG, "error")

        self.session.confessions = confessions
        self.session.reset_display()
        return confessions

    async def _post_remote(self, name: str, text: str) -> Confession:
        r = await self._client.post(self.endpoint, json={"name": name, "text": text})
        if not r.is_success:
            try:
                detail = r.json().get("message") or r.json().get("error")
            except (ValueError, AttributeError, TypeError):
                detail = None
            raise httpx.HTTPStatusError(
                detail or "Failed to save confession", request=r.request, response=r
            )
        return Confession.model_validate(r.json()["confession"])

    async def submit(self, name: Optional[str], text: str) -> Tuple[Confession, bool]:
        """Devuelve (confesión agregada, delivered)."""
        clean_text = (text or "").strip()
        if not clean_text:
            raise ValidationError(TEXT_REQUIRED)
        if self.session.submitting:
            raise SubmissionInProgressError("A confession is already being posted")

        clean_name = normalize_name(name)
        self.session.submitting = True
        try:
            try:
                confession = await self._post_remote(clean_name, clean_text)
                delivered = True
            except (httpx.HTTPError, ValueError, KeyError, TypeError, SchemaError) as e:
                log.error(f"Error saving confession: {e}")
                confession = Confession(
                    id=new_confession_id(),
                    name=clean_name,
                    text=clean_text,
                    timestamp=utc_timestamp(),
                )
                delivered = False

            self.session.confessions.insert(0, confession)
            self.cache.save(self.session.confessions)
            self.session.reset_display()
        finally:
            self.session.submitting = False

        if delivered:
            self.notify(POSTED_MSG, "success")
        else:
            self.notify(LOCAL_ONLY_MSG, "error")
        return confession, delivered
