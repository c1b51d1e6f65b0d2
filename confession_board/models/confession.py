# confession_board/models/confession.py
"""
Esquemas de confesiones y helpers compartidos por servidor y cliente.
La colección persistida es un arreglo JSON de Confession, más nueva primero.
Campos agregados a mano en el archivo se conservan tal cual al reescribirlo.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

ANONYMOUS = "Anonymous"
TEXT_REQUIRED = "Confession text is required"


class Confession(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str = ANONYMOUS
    text: str
    # ISO-8601 UTC con milisegundos y sufijo Z (ordenable como texto)
    timestamp: str

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, v):
        return ANONYMOUS if v is None else v


class ConfessionIn(BaseModel):
    name: Optional[str] = None
    # texto ausente o vacío lo rechaza el servicio con 400
    text: Optional[str] = None


ConfessionList = TypeAdapter(list[Confession])


def dump_collection(confessions: list[Confession]) -> list[dict]:
    return [c.model_dump() for c in confessions]


def normalize_name(name: Optional[str]) -> str:
    return (name or "").strip() or ANONYMOUS


def new_confession_id() -> int:
    """Milisegundos desde epoch. Unicidad best-effort (dos envíos en el mismo ms chocan)."""
    return time.time_ns() // 1_000_000


def utc_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
