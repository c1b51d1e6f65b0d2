"""
Configuración central de la app (fuente única de verdad).
Lee variables de entorno (y .env, también para el cliente) y expone un objeto Settings tipado.
Las credenciales del repositorio GitHub nunca salen del servidor.
"""
import os
from pathlib import Path
from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field

load_dotenv(find_dotenv(usecwd=True), override=False)


class Settings(BaseModel):
    # ---- Almacén remoto (GitHub contents API) ----
    GITHUB_TOKEN: str = Field(default_factory=lambda: os.getenv("GITHUB_TOKEN", ""))
    GITHUB_OWNER: str = Field(default_factory=lambda: os.getenv("GITHUB_OWNER", "muhammadrehan-dev"))
    GITHUB_REPO: str = Field(default_factory=lambda: os.getenv("GITHUB_REPO", "confession"))
    CONFESSIONS_FILE: str = Field(default_factory=lambda: os.getenv("CONFESSIONS_FILE", "data/confessions.json"))
    GITHUB_BRANCH: str = Field(default_factory=lambda: os.getenv("GITHUB_BRANCH", "main"))
    GITHUB_API_URL: str = Field(default_factory=lambda: os.getenv("GITHUB_API_URL", "https://api.github.com"))
    GITHUB_USER_AGENT: str = Field(default_factory=lambda: os.getenv("GITHUB_USER_AGENT", "Confession-Website"))
    STORE_TIMEOUT_S: float = Field(default_factory=lambda: float(os.getenv("STORE_TIMEOUT_S", "10")))
    # 1 = un solo intento (sin reintentos ante conflicto de sha)
    STORE_WRITE_ATTEMPTS: int = Field(default_factory=lambda: int(os.getenv("STORE_WRITE_ATTEMPTS", "1")))

    # ---- API HTTP ----
    API_ENDPOINT: str = Field(default_factory=lambda: os.getenv("API_ENDPOINT", "/api/confessions"))

    # ---- Cliente ----
    CONFESSIONS_PER_PAGE: int = Field(default_factory=lambda: int(os.getenv("CONFESSIONS_PER_PAGE", "10")))
    LOCAL_CACHE_PATH: Path = Field(
        default_factory=lambda: Path(os.getenv("LOCAL_CACHE_PATH", "~/.confession_board/cache.json")).expanduser()
    )
    CLIENT_TIMEOUT_S: float = Field(default_factory=lambda: float(os.getenv("CLIENT_TIMEOUT_S", "10")))

settings = Settings()
