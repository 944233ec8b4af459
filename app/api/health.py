from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.database import JsonRecordStore, StorageError, get_store
from app.schemas.response import ApiResponse

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "",
    response_model=ApiResponse[dict],
    response_model_exclude_none=True,
    summary="Health check",
    description="Basic health check endpoint."
)
@router.get("/", response_model=ApiResponse[dict], response_model_exclude_none=True, include_in_schema=False)
def health_check():
    """Simple health check."""
    return ApiResponse[dict](success=True, data={"status": "healthy"})


@router.get(
    "/ready",
    response_model=ApiResponse[dict],
    response_model_exclude_none=True,
    summary="Readiness check",
    description="Check that the products document can be read."
)
def readiness_check(store: JsonRecordStore = Depends(get_store)):
    """
    Readiness check for the record store.

    Returns 503 when the products document is unreadable or malformed.
    """
    checks = {"storage": False}

    try:
        checks["products"] = len(store.load())
        checks["storage"] = True
    except StorageError as e:
        checks["storage_error"] = str(e)

    if not checks["storage"]:
        body = ApiResponse[dict](
            success=False,
            data={"status": "not_ready", "checks": checks},
            message="Storage is not available"
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(mode="json", exclude_none=True)
        )

    return ApiResponse[dict](success=True, data={"status": "ready", "checks": checks})
