"""
Type definitions for the serialized (wire / on-disk) formats
"""

from typing import TypedDict, List, Union, NotRequired


# [[x, y], [tangentX, tangentY], [inX, inY], [outX, outY], pinnedX, pinnedY]
SerializedPathPoint = List[Union[List[float], int]]


class ConnectionDict(TypedDict):
    """Structure for a serialized connection end"""
    id: NotRequired[str]
    position: NotRequired[List[float]]


class ConnectorDict(TypedDict):
    """Structure for a serialized connector"""
    id: str
    mode: int
    source: ConnectionDict
    target: ConnectionDict
    xywh: List[float]
    rotate: float
    points: List[SerializedPathPoint]
    routable: NotRequired[bool]
    label_xywh: NotRequired[List[float]]
    label_distance: NotRequired[float]


class SceneResultDict(TypedDict):
    """Structure for the result of routing a whole scene"""
    scene: str
    connectors: List[ConnectorDict]
    timestamp: NotRequired[str]
