# confession_board/db/github_store.py
"""
Cliente del almacén remoto: un único archivo JSON en un repo de GitHub,
leído y escrito vía la contents API.

- fetch_collection(): GET del archivo; 404 = colección vacía sin sha.
- write_collection(): PUT condicionado al sha leído (concurrencia optimista).
- read_modify_write(): leer, mutar y escribir; reintenta solo ante conflicto
  de sha y solo si se le dan más de un intento.
"""
from __future__ import annotations

import base64
import json
import logging
from typing import Callable, Optional, Tuple, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError as SchemaError

from ..core.config import Settings
from ..core.errors import MalformedStoreError, RemoteReadError, RemoteWriteError
from ..models.confession import Confession, ConfessionList, dump_collection

log = logging.getLogger("confession_board.store")

Mutator = Callable[[list[Confession]], list[Confession]]
Message = Union[str, Callable[[list[Confession]], str]]


def encode_collection(confessions: list[Confession]) -> str:
    """JSON con indentación → base64 (solo para el viaje a GitHub)."""
    raw = json.dumps(dump_collection(confessions), indent=2, ensure_ascii=False)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_collection(content: str) -> list[Confession]:
    # GitHub parte el base64 en líneas de 60 caracteres
    try:
        raw = base64.b64decode("".join(content.split())).decode("utf-8")
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedStoreError(f"Invalid file encoding: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedStoreError(f"Stored confessions are not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedStoreError("Stored confessions must be a JSON array")
    try:
        return ConfessionList.validate_python(data)
    except SchemaError as e:
        raise MalformedStoreError(f"Stored confessions have an invalid shape: {e}") from e


class GitHubContentStore:
    def __init__(
        self,
        *,
        owner: str,
        repo: str,
        path: str,
        branch: str = "main",
        token: str = "",
        api_url: str = "https://api.github.com",
        user_agent: str = "Confession-Website",
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.path = path
        self.branch = branch
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": user_agent,
        }
        if token:
            headers["Authorization"] = f"token {token}"
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=timeout_s,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "GitHubContentStore":
        return cls(
            owner=settings.GITHUB_OWNER,
            repo=settings.GITHUB_REPO,
            path=settings.CONFESSIONS_FILE,
            branch=settings.GITHUB_BRANCH,
            token=settings.GITHUB_TOKEN,
            api_url=settings.GITHUB_API_URL,
            user_agent=settings.GITHUB_USER_AGENT,
            timeout_s=settings.STORE_TIMEOUT_S,
            transport=transport,
        )

    @property
    def contents_url(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{quote(self.path.strip('/'))}"

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_collection(self) -> Tuple[list[Confession], Optional[str]]:
        try:
            r = await self._client.get(self.contents_url, params={"ref": self.branch})
        except httpx.HTTPError as e:
            log.warning(f"GET {self.contents_url} failed: {e!r}")
            raise RemoteReadError(None, f"GitHub API unreachable: {e}") from e

        if r.status_code == 404:
            # El archivo aún no existe: arranque en frío
            log.info(f"{self.path}@{self.branch} not found, starting with empty collection")
            return [], None
        if not r.is_success:
            log.warning(f"GET {self.contents_url} -> {r.status_code}")
            raise RemoteReadError(r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            raise MalformedStoreError("GitHub returned a non-JSON response") from e
        if not isinstance(data, dict) or not isinstance(data.get("content"), str):
            raise MalformedStoreError("GitHub response has no file content")
        return decode_collection(data["content"]), data.get("sha")

    async def write_collection(
        self, confessions: list[Confession], sha: Optional[str], message: str
    ) -> None:
        payload = {
            "message": message,
            "content": encode_collection(confessions),
            "branch": self.branch,
        }
        if sha:
            payload["sha"] = sha

        try:
            r = await self._client.put(self.contents_url, json=payload)
        except httpx.HTTPError as e:
            log.warning(f"PUT {self.contents_url} failed: {e!r}")
            raise RemoteWriteError(f"GitHub API unreachable: {e}") from e

        if not r.is_success:
            try:
                body = r.json()
            except ValueError:
                body = {}
            remote_msg = body.get("message") if isinstance(body, dict) else None
            log.warning(f"PUT {self.contents_url} -> {r.status_code}: {remote_msg}")
            raise RemoteWriteError(remote_msg or "Failed to update GitHub", r.status_code)

    async def read_modify_write(
        self, mutator: Mutator, message: Message, attempts: int = 1
    ) -> list[Confession]:
        """
        Ciclo leer → mutar → PUT condicionado.
        Con attempts=1 un sha viejo se propaga como RemoteWriteError.
        Devuelve la colección que quedó escrita.
        """
        attempts = max(1, attempts)
        attempt = 1
        while True:
            current, sha = await self.fetch_collection()
            updated = mutator(list(current))
            msg = message(updated) if callable(message) else message
            try:
                await self.write_collection(updated, sha, msg)
                return updated
            except RemoteWriteError as e:
                if not e.is_conflict or attempt >= attempts:
                    raise
                log.info(f"stale sha {sha!r} on attempt {attempt}/{attempts}, re-reading")
                attempt += 1
