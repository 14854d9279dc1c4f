# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Domain error taxonomy.

    PropagationError
      InvalidElementsError   malformed or out-of-domain orbital input (fatal)
        TleParseError        names the offending two-line field
      DivergenceError        solver failed for one time offset (recoverable)
      OrbitDecayedError      drag model left the orbit below the surface (recoverable)
    TransformError
      NonFiniteError         NaN/Inf reached the scene transform (recoverable)
    CatalogError             a catalog fetch failed; no partial result

A camera rotation at degenerate radius is not an error: the controller
leaves its state unchanged.
"""


class PropagationError(RuntimeError):
    """Base class for orbit propagation failures."""


class InvalidElementsError(PropagationError, ValueError):
    """Orbital elements are malformed or violate their domain invariants."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class TleParseError(InvalidElementsError):
    """A two-line element record could not be parsed."""

    def __init__(self, field: str, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(field, message)


class DivergenceError(PropagationError):
    """Propagation failed to produce a finite state for one time offset."""

    def __init__(self, minutes_since_epoch: float, message: str, iterations: int = 0):
        self.minutes_since_epoch = minutes_since_epoch
        self.iterations = iterations
        super().__init__(f"t={minutes_since_epoch} min: {message}")


class OrbitDecayedError(PropagationError):
    """The drag model places perigee inside the Earth at this time offset."""

    def __init__(self, minutes_since_epoch: float, message: str):
        self.minutes_since_epoch = minutes_since_epoch
        super().__init__(f"t={minutes_since_epoch} min: {message}")


class TransformError(ValueError):
    """Base class for scene transform failures."""


class NonFiniteError(TransformError):
    """Scene transform received a NaN or infinite component."""


class CatalogError(ConnectionError):
    """A nearby-object catalog fetch failed as a whole."""
