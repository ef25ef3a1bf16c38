"""Value objects for the delta resolution pipeline."""

from dataclasses import dataclass, field
from enum import Enum

from metadelta.common.errors import InvalidStageTransition
from metadelta.git.domain.value_objects import ChangeRecord


class ResolutionStage(int, Enum):
    """Stages of the resolution pipeline, in execution order."""

    PARSED = 1
    IDENTITY_TAGGED = 2
    COLLAPSED = 3
    FILTERED = 4
    EXPANDED = 5
    FINAL = 6


@dataclass
class ResolutionState:
    """Records flowing through the pipeline and the stage they reached."""

    records: list[ChangeRecord] = field(default_factory=list)
    stage: ResolutionStage = ResolutionStage.PARSED

    def advance(self, stage: ResolutionStage, records: list[ChangeRecord]) -> None:
        """
        Move to the next stage with the records it produced.

        Args:
            stage: Stage being entered; must directly follow the current one
            records: Records produced by that stage

        Raises:
            InvalidStageTransition: If ``stage`` is not the next stage
        """
        if stage.value != self.stage.value + 1:
            raise InvalidStageTransition(
                f"Cannot move from {self.stage.name} to {stage.name}"
            )
        self.stage = stage
        self.records = records

    @property
    def lines(self) -> list[str]:
        if self.stage is not ResolutionStage.FINAL:
            raise InvalidStageTransition(f"Pipeline stopped at {self.stage.name}")
        return [record.line for record in self.records]
