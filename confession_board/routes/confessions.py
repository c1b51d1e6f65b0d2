# confession_board/routes/confessions.py
"""
Endpoint único de confesiones (GET lista, POST agrega, OPTIONS preflight).
Todas las respuestas llevan cabeceras CORS permisivas y cuerpo JSON
con la forma {error, message} cuando algo falla.
"""
import logging
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from ..core.deps import current_service
from ..core.errors import ConfessionBoardError, ValidationError
from ..models.confession import ConfessionIn
from ..services.confession_service import ConfessionService

router = APIRouter()
log = logging.getLogger("confession_board.api")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _json(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


@router.options("", summary="Preflight CORS")
async def preflight():
    return _json(status.HTTP_200_OK, {})


@router.get("", summary="Listar confesiones (más nuevas primero)")
async def list_confessions(svc: ConfessionService = Depends(current_service)):
    try:
        confessions = await svc.list_confessions()
    except ConfessionBoardError as e:
        log.exception(f"Error fetching confessions: {e}")
        return _json(500, {"error": "Failed to fetch confessions", "message": str(e)})
    return _json(status.HTTP_200_OK, {"confessions": [c.model_dump() for c in confessions]})


@router.post("", summary="Publicar una confesión")
async def add_confession(
    payload: ConfessionIn = Body(...),
    svc: ConfessionService = Depends(current_service),
):
    try:
        confession = await svc.append_confession(payload.name, payload.text)
    except ValidationError as e:
        return _json(status.HTTP_400_BAD_REQUEST, {"error": str(e)})
    except ConfessionBoardError as e:
        log.exception(f"Error adding confession: {e}")
        return _json(500, {"error": "Failed to add confession", "message": str(e)})

    return _json(status.HTTP_201_CREATED, {
        "success": True,
        "confession": confession.model_dump(),
        "message": "Confession added successfully",
    })

