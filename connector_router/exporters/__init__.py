"""
Export functionality for routed scenes

- JSON: serialized connectors, for round-tripping and integration
- DataFrame: Polars frame with one row per path point, also written as CSV
"""

from .json_export import export_to_json
from .dataframe_export import export_paths_to_dataframe, export_paths_to_csv

from .exceptions import (
    ExporterError,
    InvalidSceneResultError,
    FileExportError,
    PathValidationError
)

__all__ = [
    "export_to_json",
    "export_paths_to_dataframe",
    "export_paths_to_csv",
    "ExporterError",
    "InvalidSceneResultError",
    "FileExportError",
    "PathValidationError",
]
