"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.schemas import IngestResponse, SkippedField
from services.errors import InvalidCredentials, LockAcquisitionFailure
from services.ingest import WeatherIngestService, build_default_ingest_service

router = APIRouter()


def get_ingest_service() -> WeatherIngestService:
    return build_default_ingest_service()


@router.get(
    "/update_weather",
    response_model=IngestResponse,
    summary="Accept a station report delivered as query parameters.",
)
def update_weather(
    request: Request,
    service: WeatherIngestService = Depends(get_ingest_service),
) -> IngestResponse:
    reading = dict(request.query_params)
    try:
        summary = service.handle_report(reading)
    except InvalidCredentials as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except LockAcquisitionFailure as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    return IngestResponse(
        published=summary.published,
        publish_failures=summary.publish_failures,
        skipped=[
            SkippedField(source_key=error.source_key, reason=error.reason, raw_value=error.raw_value)
            for error in summary.skipped
        ],
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
