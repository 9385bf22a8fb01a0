"""Exception hierarchy for the correlation and flow-graph engine.

Detection, graph building, analysis and export are total over well-typed,
in-range inputs. Only out-of-range configuration (a threshold outside
[0, 1], an unknown strategy, an unsupported export format) raises.
"""

from __future__ import annotations


class EemError(Exception):
    """Base class for all engine errors."""


class InvalidArgumentError(EemError, ValueError):
    """Raised when a caller supplies an out-of-range or malformed argument."""


class UnsupportedFormatError(InvalidArgumentError):
    """Raised when a graph export is requested in an unknown format."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unsupported export format: {fmt}")
        self.format = fmt


class FlowNotFoundError(EemError, LookupError):
    """Raised by the flow service when a flow id is absent from the store."""

    def __init__(self, flow_id: str) -> None:
        super().__init__(f"Flow not found with ID: {flow_id}")
        self.flow_id = flow_id
