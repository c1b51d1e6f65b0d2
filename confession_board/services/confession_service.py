# confession_board/services/confession_service.py
"""
Servicio de confesiones: única capa con reglas de negocio.
Valida y normaliza la entrada, asigna id y timestamp, y delega la
persistencia al almacén remoto (leer → anteponer → PUT condicionado).
"""
import logging
from typing import Optional

from ..core.errors import ValidationError
from ..db.github_store import GitHubContentStore
from ..models.confession import (
    TEXT_REQUIRED,
    Confession,
    new_confession_id,
    normalize_name,
    utc_timestamp,
)

log = logging.getLogger("confession_board.service")


class ConfessionService:
    def __init__(self, store: GitHubContentStore, write_attempts: int = 1) -> None:
        self.store = store
        self.write_attempts = write_attempts

    async def list_confessions(self) -> list[Confession]:
        confessions, _sha = await self.store.fetch_collection()
        return confessions

    async def append_confession(self, name: Optional[str], text: Optional[str]) -> Confession:
        clean_text = (text or "").strip()
        if not clean_text:
            raise ValidationError(TEXT_REQUIRED)

        confession = Confession(
            id=new_confession_id(),
            name=normalize_name(name),
            text=clean_text,
            timestamp=utc_timestamp(),
        )

        await self.store.read_modify_write(
            lambda current: [confession, *current],
            f"Add confession from {confession.name}",
            attempts=self.write_attempts,
        )
        log.info(f"confession {confession.id} stored")
        return confession
