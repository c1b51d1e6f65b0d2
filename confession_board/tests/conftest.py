# confession_board/tests/conftest.py
"""
Fixtures y helpers para pruebas con FastAPI + pytest-asyncio.
La contents API de GitHub se simula en memoria con httpx.MockTransport
(respeta la precondición de sha igual que el servicio real).
"""
import base64
import hashlib
import json
import sys
from pathlib import Path
from typing import Callable, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

# ---- asegurar imports absolutos 'confession_board.*' ----
ROOT_DIR = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT_DIR))

from confession_board.main import app  # noqa: E402
from confession_board.core.deps import current_store  # noqa: E402
from confession_board.db.github_store import GitHubContentStore  # noqa: E402

OWNER, REPO, FILE_PATH, BRANCH = "acme", "board", "data/confessions.json", "main"
CONTENTS_PATH = f"/repos/{OWNER}/{REPO}/contents/{FILE_PATH}"


class FakeContentsApi:
    """Un único archivo versionado por sha, con las respuestas de GitHub."""

    def __init__(self) -> None:
        self.raw: Optional[bytes] = None
        self.sha: Optional[str] = None
        self.gets = 0
        self.puts: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.fail_get_status: Optional[int] = None
        # se ejecuta una vez justo después de servir un GET (otro escritor)
        self.after_get: Optional[Callable[[], None]] = None

    # ---- helpers de estado ----
    def seed(self, confessions: list[dict] | str) -> None:
        text = confessions if isinstance(confessions, str) else json.dumps(confessions, indent=2)
        self._commit(text.encode("utf-8"))

    def stored(self) -> list[dict]:
        return json.loads(self.raw.decode("utf-8"))

    def _commit(self, raw: bytes) -> None:
        self.raw = raw
        self.sha = hashlib.sha1(raw + str(len(self.puts)).encode()).hexdigest()

    # ---- transporte ----
    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path != CONTENTS_PATH:
            return httpx.Response(404, json={"message": "Not Found"})
        if request.method == "GET":
            return self._get(request)
        if request.method == "PUT":
            return self._put(request)
        return httpx.Response(405, json={"message": "Method Not Allowed"})

    def _get(self, request: httpx.Request) -> httpx.Response:
        self.gets += 1
        if self.fail_get_status:
            return httpx.Response(self.fail_get_status, json={"message": "boom"})
        if self.raw is None:
            return httpx.Response(404, json={"message": "Not Found"})
        encoded = base64.b64encode(self.raw).decode("ascii")
        # GitHub parte el base64 en líneas
        wrapped = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60))
        response = httpx.Response(200, json={"content": wrapped, "encoding": "base64", "sha": self.sha})
        if self.after_get:
            hook, self.after_get = self.after_get, None
            hook()
        return response

    def _put(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        sha = body.get("sha")
        if self.raw is not None and not sha:
            return httpx.Response(422, json={"message": "Invalid request.\n\n\"sha\" wasn't supplied."})
        if self.raw is not None and sha != self.sha:
            return httpx.Response(409, json={"message": f"{FILE_PATH} does not match {sha}"})
        if self.raw is None and sha:
            return httpx.Response(409, json={"message": f"{FILE_PATH} does not match {sha}"})
        self.puts.append(body)
        self._commit(base64.b64decode(body["content"]))
        return httpx.Response(200, json={"content": {"sha": self.sha}, "commit": {"message": body["message"]}})


def make_store(api: FakeContentsApi, token: str = "secret") -> GitHubContentStore:
    return GitHubContentStore(
        owner=OWNER, repo=REPO, path=FILE_PATH, branch=BRANCH,
        token=token, transport=httpx.MockTransport(api),
    )


@pytest.fixture
def fake_api() -> FakeContentsApi:
    return FakeContentsApi()


@pytest_asyncio.fixture
async def store(fake_api):
    s = make_store(fake_api)
    yield s
    await s.aclose()


@pytest_asyncio.fixture
async def async_client(store):
    app.dependency_overrides[current_store] = lambda: store
    try:
        async with LifespanManager(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://testserver") as client:
                yield client
    finally:
        app.dependency_overrides.clear()
