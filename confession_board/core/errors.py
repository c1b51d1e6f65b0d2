# confession_board/core/errors.py
"""
Taxonomía de errores del tablero.
- ValidationError: entrada del cliente inválida (400, sin reintento).
- RemoteReadError / MalformedStoreError: falla al leer el archivo remoto.
- RemoteWriteError: el PUT fue rechazado (incluye conflictos de sha).
"""
from typing import Optional


class ConfessionBoardError(Exception):
    """Base de todos los errores propios."""


class ValidationError(ConfessionBoardError):
    pass


class RemoteReadError(ConfessionBoardError):
    def __init__(self, status_code: Optional[int], message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"GitHub API error: {status_code}")


class MalformedStoreError(ConfessionBoardError):
    """El contenido del archivo no es un arreglo JSON de confesiones. No se repara solo."""


class RemoteWriteError(ConfessionBoardError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_conflict(self) -> bool:
        """True si el almacén rechazó la escritura por sha desactualizado."""
        if self.status_code == 409:
            return True
        return self.status_code == 422 and "sha" in str(self).lower()


class SubmissionInProgressError(ConfessionBoardError):
    """El cliente ya tiene un envío en vuelo (equivale al botón deshabilitado)."""
