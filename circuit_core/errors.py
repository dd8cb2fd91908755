from __future__ import annotations


class CircuitCoreError(Exception):
    """Base class for engine failures (not for compliance findings)."""


class NotInitializedError(CircuitCoreError):
    def __init__(self, service_name: str = "CalculationService") -> None:
        super().__init__(f"{service_name} is not initialized; call initialize() first")
        self.service_name = service_name


class PipelineStageError(CircuitCoreError):
    """
    Unexpected failure inside one pipeline stage (classify/group/compute).
    The original exception is chained as __cause__.
    """

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage} stage failed: {message}")
        self.stage = stage


class ConfigError(CircuitCoreError, ValueError):
    pass
