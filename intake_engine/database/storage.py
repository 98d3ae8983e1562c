"""
Simple JSON file storage

- Stand-in for the application database: intake progress and submissions
- Records are stored per device in separate files under DATA_DIR
- Easy to migrate to SQL/NoSQL later by replacing these functions
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from intake_engine.core import config


def data_path(*parts: str) -> Path:
    return Path(config.DATA_DIR).joinpath(*parts)


def read_json(filepath: Path) -> List[Dict[str, Any]]:
    """
    Read JSON file, return empty list if not found
    """
    try:
        with open(filepath, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return []


def write_json(filepath: Path, data: List[Dict[str, Any]]):
    """
    Write data to JSON file
    """
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)


def save_progress(progress: Dict[str, Any], device_id: str):
    """
    Save intake progress for a specific device (overwrites previous progress)
    """
    write_json(data_path("progress", f"{device_id}.json"), [progress])


def get_progress(device_id: str) -> Optional[Dict[str, Any]]:
    """
    Get saved intake progress for a specific device
    """
    records = read_json(data_path("progress", f"{device_id}.json"))
    return records[0] if records else None


def delete_progress(device_id: str):
    path = data_path("progress", f"{device_id}.json")
    if path.exists():
        path.unlink()


def save_submission(submission: Dict[str, Any], device_id: str):
    """
    Append an accepted intake submission for a specific device
    """
    filepath = data_path("submissions", f"{device_id}.json")
    data = read_json(filepath)
    data.append(submission)
    write_json(filepath, data)


def get_submissions(device_id: str) -> List[Dict[str, Any]]:
    """
    All submissions for a specific device, oldest first
    """
    return read_json(data_path("submissions", f"{device_id}.json"))
