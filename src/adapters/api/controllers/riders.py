from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from src.adapters.api.controllers.arrivals import build_query, result_to_schema
from src.adapters.api.dependencies import get_session_registry
from src.adapters.api.schemas.arrivals import RiderSessionSchema, SearchRequestSchema
from src.app.services.rider_session_service import RiderSessionRegistry
from src.domain.exceptions import InvalidQuery

router = APIRouter(prefix="/riders", tags=["riders"])


@router.post("/{rider_id}/search", response_model=RiderSessionSchema)
async def start_search(
    rider_id: str,
    req: SearchRequestSchema,
    registry: RiderSessionRegistry = Depends(get_session_registry),
) -> RiderSessionSchema:
    try:
        query = build_query(
            lat=req.location.lat,
            lon=req.location.lon,
            direction=req.direction,
            line=req.line,
        )
    except InvalidQuery as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    result = registry.start(rider_id, query)
    session = registry.get(rider_id)
    return RiderSessionSchema(
        rider_id=rider_id,
        auto_refresh_active=bool(session and session.auto_refresh_active),
        updates_sent=session.updates_sent if session else 0,
        result=result_to_schema(result),
    )


@router.get("/{rider_id}/latest", response_model=RiderSessionSchema)
def latest_result(
    rider_id: str,
    registry: RiderSessionRegistry = Depends(get_session_registry),
) -> RiderSessionSchema:
    session = registry.get(rider_id)
    if session is None or session.latest is None:
        raise HTTPException(status_code=404, detail="No search for this rider")
    return RiderSessionSchema(
        rider_id=rider_id,
        auto_refresh_active=session.auto_refresh_active,
        updates_sent=session.updates_sent,
        result=result_to_schema(session.latest),
    )


@router.delete("/{rider_id}/search", status_code=204)
def stop_search(
    rider_id: str,
    registry: RiderSessionRegistry = Depends(get_session_registry),
) -> Response:
    if not registry.stop(rider_id):
        raise HTTPException(status_code=404, detail="No search for this rider")
    return Response(status_code=204)
