"""StageReporter: the single notification point for stage results."""
import logging
import sys
from abc import ABC, abstractmethod
from typing import TextIO

from transcoder.constants import (
    MSG_ASR_RESULTS,
    MSG_FORMAT_DETECTED,
    MSG_PREPARATION_DONE,
    MSG_STAGE_FAILED,
)
from transcoder.pipeline.events import (
    DetectionResult,
    PreparationResult,
    StageEvent,
    StageFailure,
    TranscriptionResult,
)

logger = logging.getLogger(__name__)


class StageReporter(ABC):
    @abstractmethod
    def report(self, event: StageEvent) -> None:
        """Receive one stage result. Called once per stage, in stage order."""
        ...


class ConsoleReporter(StageReporter):
    """Logs detection and preparation payloads; writes the transcript to a stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def report(self, event: StageEvent) -> None:
        match event:
            case DetectionResult(payload=payload):
                logger.info(MSG_FORMAT_DETECTED, payload)
            case PreparationResult(payload=payload):
                logger.info(MSG_PREPARATION_DONE, payload)
            case TranscriptionResult(payload=payload):
                stream = self._stream or sys.stdout
                stream.write(f"{MSG_ASR_RESULTS}\n{payload}\n")
                stream.flush()
            case StageFailure(stage=stage, reason=reason):
                logger.error(MSG_STAGE_FAILED, stage.value, reason)
