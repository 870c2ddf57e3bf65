"""
Export routed connector paths to a Polars DataFrame
"""

import logging
from typing import Any, Dict, List, Optional

import polars as pl

from ..core.types import SceneResultDict
from .exceptions import FileExportError, PathValidationError
from .utils import validate_file_path, validate_scene_result

logger = logging.getLogger(__name__)

PATH_SCHEMA = {
    'scene': pl.Utf8,
    'connector_id': pl.Utf8,
    'mode': pl.Int64,
    'routable': pl.Boolean,
    'point_index': pl.Int64,
    'x': pl.Float64,
    'y': pl.Float64,
    'tangent_x': pl.Float64,
    'tangent_y': pl.Float64,
    'in_x': pl.Float64,
    'in_y': pl.Float64,
    'out_x': pl.Float64,
    'out_y': pl.Float64,
    'pinned_x': pl.Boolean,
    'pinned_y': pl.Boolean,
}


def export_paths_to_dataframe(result: SceneResultDict) -> pl.DataFrame:
    """
    Flatten a routed scene into one row per path point

    Coordinates are absolute (the connector's ``xywh`` origin is added to
    each relative point). A scene without connectors gives an empty frame
    with the full schema.

    Args:
        result: Scene result with ``scene`` and ``connectors`` keys

    Returns:
        Polars DataFrame following ``PATH_SCHEMA``

    Raises:
        InvalidSceneResultError: If the result has invalid structure
    """
    try:
        validated = validate_scene_result(result)
    except Exception as e:
        logger.error(f"Scene result validation failed: {e}")
        raise

    rows: List[Dict[str, Any]] = []
    for connector in validated['connectors']:
        origin_x, origin_y = connector['xywh'][0], connector['xywh'][1]
        for index, (xy, tangent, in_vec, out_vec, pinned_x, pinned_y) in enumerate(connector['points']):
            rows.append({
                'scene': validated['scene'],
                'connector_id': connector['id'],
                'mode': connector['mode'],
                'routable': connector.get('routable', True),
                'point_index': index,
                'x': xy[0] + origin_x,
                'y': xy[1] + origin_y,
                'tangent_x': tangent[0],
                'tangent_y': tangent[1],
                'in_x': in_vec[0],
                'in_y': in_vec[1],
                'out_x': out_vec[0],
                'out_y': out_vec[1],
                'pinned_x': bool(pinned_x),
                'pinned_y': bool(pinned_y),
            })

    if not rows:
        logger.info("No connector paths to export, returning empty DataFrame")
        return pl.DataFrame(schema=PATH_SCHEMA)

    df = pl.DataFrame(rows, schema=PATH_SCHEMA)
    logger.info(f"Exported {len(df)} path points from {len(validated['connectors'])} connectors")
    return df


def export_paths_to_csv(result: SceneResultDict, file_path: Optional[str] = None) -> str:
    """
    Write the path-point frame as CSV

    Returns:
        CSV text (also written to ``file_path`` when given)

    Raises:
        PathValidationError: If file_path is invalid or unsafe
        FileExportError: If the file write fails
    """
    df = export_paths_to_dataframe(result)
    csv_text = df.write_csv()

    if file_path:
        try:
            validated_path = validate_file_path(file_path)
            validated_path.write_text(csv_text, encoding='utf-8')
            logger.info(f"Path points exported to: {validated_path}")
        except PathValidationError:
            raise
        except OSError as e:
            logger.error(f"Failed to write CSV file: {e}")
            raise FileExportError(f"Failed to write file '{file_path}': {e}") from e

    return csv_text
