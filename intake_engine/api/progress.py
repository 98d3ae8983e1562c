"""
Intake progress endpoints

Lets the wizard save partial answers and resume later on the same device
"""
from datetime import datetime

from fastapi import APIRouter, HTTPException, Request

from intake_engine.api.utils import get_device_id
from intake_engine.database import storage as database
from intake_engine.database.schemas import IntakeProgress

router = APIRouter(prefix="/intake", tags=["intake"])


@router.get("/progress", response_model=IntakeProgress)
async def get_progress(request: Request):
    """
    Get saved intake progress for the device
    """
    device_id = get_device_id(request)
    progress = database.get_progress(device_id)
    if not progress:
        raise HTTPException(status_code=404, detail="No intake progress found")
    return IntakeProgress(**progress)


@router.post("/progress", response_model=IntakeProgress)
async def save_progress(progress: IntakeProgress, request: Request):
    """
    Save intake progress (auto-save between wizard steps)

    New responses are merged over previously saved ones
    """
    device_id = get_device_id(request)

    existing = database.get_progress(device_id)
    if existing:
        progress.responses = {**existing.get("responses", {}), **progress.responses}
        if progress.selected_path is None:
            progress.selected_path = existing.get("selectedPath")

    progress.last_saved_at = datetime.now()
    database.save_progress(progress.model_dump(mode="json", by_alias=True), device_id)

    return progress


@router.delete("/progress")
async def delete_progress(request: Request):
    """
    Discard saved intake progress for the device
    """
    device_id = get_device_id(request)
    database.delete_progress(device_id)
    return {"message": "Intake progress deleted successfully"}
