"""Quality search strategies for size-constrained encoding."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

from resize_backend.domain.value_objects.pipeline_config import PipelineConfig


class QualityStrategy(ABC):
    """Chooses the next encoding quality after an over-budget attempt."""

    @property
    @abstractmethod
    def floor(self) -> int:
        """Lowest quality the strategy will ever return."""

    @abstractmethod
    def next_quality(self, current: int, candidate_size: int, target_size: int) -> int:
        """Return the quality for the next attempt; never below ``floor``."""

    def initial_quality(self, requested: int) -> int:
        return int(min(max(requested, 1), 100))


class ProportionalStepStrategy(QualityStrategy):
    """
    Steps quality down by an amount that grows with the overshoot ratio.

    With the default table: >3x over budget drops 40, >2x drops 25, >1.5x
    drops 15, >1.2x drops 10, anything closer drops 5.
    """

    def __init__(
        self,
        steps: Optional[Sequence[Tuple[float, int]]] = None,
        default_step: Optional[int] = None,
        floor: Optional[int] = None,
    ):
        config = PipelineConfig()
        self._steps = tuple(steps) if steps is not None else config.quality_steps
        self._default_step = default_step if default_step is not None else config.default_quality_step
        self._floor = floor if floor is not None else config.quality_floor

    @classmethod
    def from_config(cls, config: PipelineConfig) -> ProportionalStepStrategy:
        return cls(config.quality_steps, config.default_quality_step, config.quality_floor)

    @property
    def floor(self) -> int:
        return self._floor

    def step_for(self, ratio: float) -> int:
        for threshold, step in self._steps:
            if ratio > threshold:
                return step
        return self._default_step

    def next_quality(self, current: int, candidate_size: int, target_size: int) -> int:
        ratio = candidate_size / max(target_size, 1)
        return max(self._floor, current - self.step_for(ratio))
