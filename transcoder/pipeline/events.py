"""Stage events: the closed set of completion notifications the orchestrator consumes."""
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from transcoder.pipeline.job import Stage


@dataclass(frozen=True)
class DetectionResult:
    stage: ClassVar[Stage] = Stage.DETECTING
    payload: Optional[str]


@dataclass(frozen=True)
class PreparationResult:
    stage: ClassVar[Stage] = Stage.PREPARING
    payload: Optional[str]
    output: Optional[str] = None


@dataclass(frozen=True)
class TranscriptionResult:
    stage: ClassVar[Stage] = Stage.TRANSCRIBING
    payload: Optional[str]


@dataclass(frozen=True)
class StageFailure:
    stage: Stage
    reason: str


StageEvent = Union[DetectionResult, PreparationResult, TranscriptionResult, StageFailure]
