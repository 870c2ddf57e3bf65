"""
Candidate-graph A* routing for orthogonal connector paths.

This package computes Manhattan routes between two endpoints, keeping
clear of the rectangular bounds of the shapes each endpoint sits on.
"""

from .candidates import Candidate, compute_offsets, collect_candidates, remove_duplicate_points
from .astar import AStarRunner
from .path_optimizer import direct_path, merge_path, remove_extra_points_on_one_line, is_orthogonal_path
from .orthogonal import OrthogonalRouter

__all__ = [
    'Candidate',
    'compute_offsets',
    'collect_candidates',
    'remove_duplicate_points',
    'AStarRunner',
    'direct_path',
    'merge_path',
    'remove_extra_points_on_one_line',
    'is_orthogonal_path',
    'OrthogonalRouter',
]
