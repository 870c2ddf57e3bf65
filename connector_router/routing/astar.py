"""
A* pathfinding over the orthogonal candidate graph.

Implements A* with a lexicographic cost that considers:
- Path length (Manhattan distance)
- Direction changes (prefer fewer elbows among equally short routes)
- Candidate priority (prefer gap and centre points among otherwise equal routes)
"""

from typing import Dict, List, Optional, Sequence, Tuple
from collections import defaultdict
from dataclasses import dataclass, field
import heapq
import itertools

from ..geometry.bound import Bound
from ..geometry.vec import Vec
from .candidates import Candidate, MAX_PRIORITY

# Direction indices: up, right, down, left
DIRECTIONS = [(0, -1), (1, 0), (0, 1), (-1, 0)]
NO_DIRECTION = -1

Cost = Tuple[float, int, int]


@dataclass(order=True)
class Node:
    """Node in A* search."""
    f_cost: Cost = field(compare=True)
    tie: int = field(compare=True)
    g_cost: Cost = field(compare=False)
    candidate: Candidate = field(compare=False)
    direction: int = field(compare=False)
    parent: Optional['Node'] = field(default=None, compare=False)


def manhattan_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Calculate Manhattan distance between two points."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def direction_between(a: Sequence[float], b: Sequence[float]) -> int:
    """Direction index of the axis-aligned move a -> b (NO_DIRECTION if not axis-aligned)."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    if dx == 0 and dy == 0:
        return NO_DIRECTION
    if dx == 0:
        return 2 if dy > 0 else 0
    if dy == 0:
        return 1 if dx > 0 else 3
    # Oblique approach: use the dominant axis
    if abs(dx) >= abs(dy):
        return 1 if dx > 0 else 3
    return 2 if dy > 0 else 0


def add_cost(a: Cost, b: Cost) -> Cost:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


class AStarRunner:
    """
    A* search over candidate points.

    Every candidate is linked to its nearest neighbour in each of the four
    axis directions. A link is unusable when it crosses the open interior of
    a blocking bound.
    """

    def __init__(
        self,
        points: Sequence[Candidate],
        start: Candidate,
        goal: Candidate,
        origin_start: Sequence[float],
        origin_end: Sequence[float],
        blocks: Sequence[Bound] = (),
        expand_blocks: Sequence[Bound] = ()
    ):
        """
        Initialize the runner.

        Args:
            points: Candidate points (must include ``start`` and ``goal``)
            start: Search start (first point outside the start corridor)
            goal: Search goal (last point outside the end corridor)
            origin_start: Point the route arrives from before ``start``
            origin_end: Point the route leaves to after ``goal``
            blocks: Unexpanded endpoint bounds
            expand_blocks: Expanded corridors around the endpoint bounds
        """
        self.points = list(points)
        self.start = start
        self.goal = goal
        self.origin_start = Vec(origin_start[0], origin_start[1])
        self.origin_end = Vec(origin_end[0], origin_end[1])
        self.blocks = list(blocks)
        self.expand_blocks = list(expand_blocks)
        self.path: List[Vec] = []

        self._by_x: Dict[float, List[Candidate]] = defaultdict(list)
        self._by_y: Dict[float, List[Candidate]] = defaultdict(list)
        for p in self.points:
            self._by_x[p.x].append(p)
            self._by_y[p.y].append(p)
        for column in self._by_x.values():
            column.sort(key=lambda p: p.y)
        for row in self._by_y.values():
            row.sort(key=lambda p: p.x)

    def _is_blocked(self, a: Candidate, b: Candidate, obstacles: Sequence[Bound]) -> bool:
        return any(block.segment_crosses_interior(a, b) for block in obstacles)

    def _neighbors(self, cur: Candidate, obstacles: Sequence[Bound]) -> List[Tuple[Candidate, int]]:
        """Nearest unblocked candidate in each axis direction."""
        neighbors = []

        column = self._by_x[cur.x]
        row = self._by_y[cur.y]
        i = column.index(cur)
        j = row.index(cur)

        options = [
            (column[i - 1] if i > 0 else None, 0),
            (row[j + 1] if j + 1 < len(row) else None, 1),
            (column[i + 1] if i + 1 < len(column) else None, 2),
            (row[j - 1] if j > 0 else None, 3),
        ]
        for neighbor, direction in options:
            if neighbor is not None and not self._is_blocked(cur, neighbor, obstacles):
                neighbors.append((neighbor, direction))

        return neighbors

    def _step_cost(self, node: Node, neighbor: Candidate, direction: int) -> Cost:
        turn = 1 if node.direction not in (NO_DIRECTION, direction) else 0
        if neighbor == self.goal:
            exit_direction = direction_between(self.goal, self.origin_end)
            if exit_direction not in (NO_DIRECTION, direction):
                turn += 1
        return (
            manhattan_distance(node.candidate, neighbor),
            turn,
            MAX_PRIORITY - neighbor.priority,
        )

    def _search(self, obstacles: Sequence[Bound]) -> Optional[Node]:
        counter = itertools.count()
        first_direction = direction_between(self.origin_start, self.start)

        start_node = Node(
            f_cost=(manhattan_distance(self.start, self.goal), 0, 0),
            tie=next(counter),
            g_cost=(0.0, 0, 0),
            candidate=self.start,
            direction=first_direction,
        )
        if self.start == self.goal:
            return start_node

        open_set = [start_node]
        best_g: Dict[Tuple[Candidate, int], Cost] = {(self.start, first_direction): start_node.g_cost}
        closed_set = set()

        while open_set:
            current = heapq.heappop(open_set)
            state = (current.candidate, current.direction)

            # Goal reached
            if current.candidate == self.goal:
                return current

            # Already visited
            if state in closed_set:
                continue
            closed_set.add(state)

            for neighbor, direction in self._neighbors(current.candidate, obstacles):
                next_state = (neighbor, direction)
                if next_state in closed_set:
                    continue

                g_cost = add_cost(current.g_cost, self._step_cost(current, neighbor, direction))
                if next_state in best_g and g_cost >= best_g[next_state]:
                    continue
                best_g[next_state] = g_cost

                h_cost = manhattan_distance(neighbor, self.goal)
                heapq.heappush(open_set, Node(
                    f_cost=(g_cost[0] + h_cost, g_cost[1], g_cost[2]),
                    tie=next(counter),
                    g_cost=g_cost,
                    candidate=neighbor,
                    direction=direction,
                    parent=current,
                ))

        return None

    def run(self) -> bool:
        """
        Search for a route.

        Corridors are tried as obstacles first; when they leave no way
        through (overlapping corridors), only the unexpanded bounds block.

        Returns:
            True if a route was found; the route is stored in ``self.path``
            and starts at ``origin_start`` and ends at ``origin_end``
        """
        goal_node = self._search(self.blocks + self.expand_blocks)
        if goal_node is None and self.expand_blocks:
            goal_node = self._search(self.blocks)

        if goal_node is None:
            self.path = []
            return False

        self.path = [self.origin_start] + reconstruct_path(goal_node) + [self.origin_end]
        return True


def reconstruct_path(node: Node) -> List[Vec]:
    """Reconstruct path from goal node by following parent pointers."""
    path = []
    current = node

    while current is not None:
        path.append(current.candidate.vec)
        current = current.parent

    path.reverse()
    return path
