"""
Request helpers shared by the intake routers
"""
import re

from fastapi import Request, HTTPException

# Device ids name the storage files, so keep them to filename-safe characters
DEVICE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,128}$")


def get_device_id(request: Request) -> str:
    """
    Device ID from the X-Device-ID header

    Raises HTTPException 400 when the header is missing or not a safe identifier
    """
    device_id = request.headers.get('X-Device-ID', '').strip()
    if not device_id:
        raise HTTPException(
            status_code=400,
            detail="Missing X-Device-ID header. This header is required for this request."
        )
    if not DEVICE_ID_PATTERN.match(device_id) or device_id.startswith('.'):
        raise HTTPException(status_code=400, detail="Invalid X-Device-ID header")
    return device_id
