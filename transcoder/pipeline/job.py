"""PipelineJob: one audio-source-to-transcript run and its stage state machine."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from transcoder.errors import InvalidTransition


class Stage(str, Enum):
    IDLE = "idle"
    DETECTING = "detecting"
    PREPARING = "preparing"
    TRANSCRIBING = "transcribing"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[Stage, frozenset[Stage]] = {
    Stage.IDLE: frozenset({Stage.DETECTING, Stage.FAILED}),
    Stage.DETECTING: frozenset({Stage.PREPARING, Stage.FAILED}),
    Stage.PREPARING: frozenset({Stage.TRANSCRIBING, Stage.FAILED}),
    Stage.TRANSCRIBING: frozenset({Stage.COMPLETED, Stage.FAILED}),
    Stage.COMPLETED: frozenset(),
    Stage.FAILED: frozenset(),
}

TERMINAL_STAGES = frozenset({Stage.COMPLETED, Stage.FAILED})


@dataclass
class PipelineJob:
    source: str
    stage: Stage = Stage.IDLE
    detected_format: Optional[str] = None
    preparation: Optional[str] = None
    prepared_output: Optional[str] = None
    result: Optional[str] = None
    failure_reason: Optional[str] = None
    transitions: list[tuple[Stage, Stage]] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.stage in TERMINAL_STAGES

    def advance(self, target: Stage) -> None:
        match target in _TRANSITIONS[self.stage]:
            case True:
                self.transitions.append((self.stage, target))
                self.stage = target
            case False:
                raise InvalidTransition(
                    f"Cannot move job from {self.stage.value} to {target.value}"
                )

    def fail(self, reason: str) -> None:
        self.advance(Stage.FAILED)
        self.failure_reason = reason
