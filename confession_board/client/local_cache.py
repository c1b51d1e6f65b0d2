# confession_board/client/local_cache.py
"""
Caché local del cliente (equivalente a localStorage del navegador).
Un archivo JSON con {clave: arreglo serializado}. Lectura/escritura síncrona;
un solo escritor por archivo (varias pestañas/procesos no se coordinan).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as SchemaError

from ..models.confession import Confession, ConfessionList, dump_collection

log = logging.getLogger("confession_board.client.cache")

CACHE_KEY = "confessions"


class LocalCache:
    def __init__(self, path: Path | str, key: str = CACHE_KEY) -> None:
        self.path = Path(path).expanduser()
        self.key = key

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            log.warning(f"unreadable cache {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)

    def load(self) -> Optional[list[Confession]]:
        """None si no hay caché (o si está corrupta)."""
        stored = self.get_item(self.key)
        if stored is None:
            return None
        try:
            return ConfessionList.validate_json(stored)
        except SchemaError as e:
            log.warning(f"ignoring corrupt cache entry {self.key!r}: {e.error_count()} errors")
            return None

    def save(self, confessions: list[Confession]) -> None:
        self.set_item(self.key, json.dumps(dump_collection(confessions), ensure_ascii=False))
