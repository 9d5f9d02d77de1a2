# app/routers/media.py
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.auth import require_admin

router = APIRouter(
    prefix="/media",
    tags=["Media"],
    dependencies=[Depends(require_admin)],
)

# Images are uploaded by the admin frontend straight to storage; product
# payloads only carry the resulting URLs.
UPLOADS_MOVED = "Media uploads are now handled directly by the frontend"


@router.post("/upload")
def upload():
    raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=UPLOADS_MOVED)


@router.post("/upload-multiple")
def upload_multiple():
    raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=UPLOADS_MOVED)
