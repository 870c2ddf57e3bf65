"""
Custom exceptions for the connector routing engine
"""


class RouterError(Exception):
    """Base exception for all routing engine errors"""
    pass


class ConfigError(RouterError):
    """Raised when a router configuration is invalid"""
    pass


class InvalidConnectionError(RouterError):
    """Raised when a connection end references something it must not"""
    pass


class UnresolvableEndpointError(RouterError):
    """Raised when a connection references a shape that no longer exists"""

    def __init__(self, shape_id: str):
        super().__init__(f"Shape '{shape_id}' referenced by connector endpoint cannot be resolved")
        self.shape_id = shape_id


class CandidateSetError(RouterError):
    """Raised when orthogonal candidate generation violates its own invariants.

    This signals a defect in the candidate algorithm rather than bad input;
    the recompute that hit it must be aborted.
    """
    pass


class InvalidPathError(RouterError):
    """Raised when a serialized path cannot be decoded"""
    pass


class SceneError(RouterError):
    """Raised when a scene file cannot be loaded"""
    pass
