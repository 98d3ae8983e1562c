"""
Question library service

Loads question blocks and intake paths from the bundled JSON definitions
"""
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from pydantic import TypeAdapter

from intake_engine.core import config
from intake_engine.database.cache import get_library_cache
from intake_engine.database.schemas import IntakePathConfig, QuestionBlock

logger = logging.getLogger(__name__)

_blocks_adapter = TypeAdapter(List[QuestionBlock])
_paths_adapter = TypeAdapter(List[IntakePathConfig])


def read_definitions(filename: str) -> List[Any]:
    """
    Read a JSON definitions file from the library directory

    Missing files yield an empty list. Malformed JSON is a configuration
    error and propagates.
    """
    path = Path(config.LIBRARY_DIR) / filename
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning(f"Library file not found: {path}")
        return []


def load_question_blocks() -> List[QuestionBlock]:
    """
    All question blocks, sorted by order (cached)
    """
    cache = get_library_cache()
    blocks = cache.get("question_blocks")
    if blocks is None:
        blocks = sorted(_blocks_adapter.validate_python(read_definitions("question_blocks.json")), key=lambda b: b.order)
        cache.set("question_blocks", blocks)
        logger.info(f"Loaded {len(blocks)} question blocks")
    return blocks


def load_intake_paths() -> List[IntakePathConfig]:
    """
    All intake paths (cached)
    """
    cache = get_library_cache()
    paths = cache.get("intake_paths")
    if paths is None:
        paths = _paths_adapter.validate_python(read_definitions("intake_paths.json"))
        cache.set("intake_paths", paths)
        logger.info(f"Loaded {len(paths)} intake paths")
    return paths


def get_intake_path(client_type: str) -> Optional[IntakePathConfig]:
    """
    Active intake path for a client type, or None
    """
    for path in load_intake_paths():
        if path.client_type == client_type and path.is_active:
            return path
    return None


def get_question_blocks(block_ids: List[str]) -> List[QuestionBlock]:
    """
    Active blocks for the given ids, in the order of block_ids
    """
    blocks_by_id = {block.id: block for block in load_question_blocks() if block.is_active}
    return [blocks_by_id[block_id] for block_id in block_ids if block_id in blocks_by_id]
