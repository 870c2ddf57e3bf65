"""
Export routed scenes to JSON format
"""

import json
import logging
from typing import Optional

from ..core.types import SceneResultDict
from .exceptions import FileExportError, PathValidationError
from .utils import validate_file_path, validate_scene_result

logger = logging.getLogger(__name__)


def export_to_json(
    result: SceneResultDict,
    file_path: Optional[str] = None,
    indent: int = 2
) -> str:
    """
    Export a routed scene to JSON

    Every connector is written in its serialized form, including the path
    points in ``[[x, y], [tx, ty], [inX, inY], [outX, outY], pinX, pinY]``
    layout relative to the connector's ``xywh``.

    Args:
        result: Scene result with ``scene`` and ``connectors`` keys
        file_path: Optional path to save the JSON file. If None, only returns the string
        indent: Number of spaces for indentation (default: 2)

    Returns:
        JSON string representation of the result

    Raises:
        InvalidSceneResultError: If the result has invalid structure
        PathValidationError: If file_path is invalid or unsafe
        FileExportError: If serialization or the file write fails
    """
    try:
        validated = validate_scene_result(result)
    except Exception as e:
        logger.error(f"Scene result validation failed: {e}")
        raise

    try:
        json_str = json.dumps(validated, indent=indent, default=str)
    except (TypeError, ValueError) as e:
        logger.error(f"JSON serialization failed: {e}")
        raise FileExportError(f"Failed to serialize scene result to JSON: {e}") from e

    if file_path:
        try:
            validated_path = validate_file_path(file_path)
            validated_path.write_text(json_str, encoding='utf-8')
            logger.info(f"Routes exported to: {validated_path}")
        except PathValidationError:
            raise
        except OSError as e:
            logger.error(f"Failed to write JSON file: {e}")
            raise FileExportError(f"Failed to write file '{file_path}': {e}") from e

    return json_str
