"""PipelineOrchestrator: drives a PipelineJob through detection, preparation and transcription.

Each collaborator call runs as its own task. When the task finishes, exactly
one event (the stage result or a StageFailure) is posted to the
orchestrator's queue, and the state machine decides the next step from the
event and the job's current stage. Collaborators that complete from another
thread can post through :meth:`PipelineOrchestrator.notify`, which hands the
event over to the orchestrator's loop, so the job is only ever mutated from
that loop.
"""
import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from transcoder.config import Options
from transcoder.constants import (
    MSG_ERR_COLLABORATOR,
    MSG_ERR_EMPTY_PAYLOAD,
    MSG_ERR_NOT_IDLE,
    MSG_ERR_NOT_STARTED,
    MSG_JOB_FAILED,
    MSG_STAGE_ENTER,
    MSG_STALE_EVENT,
)
from transcoder.detection.client import FormatDetectionClient
from transcoder.errors import ConfigError, InvalidTransition
from transcoder.pipeline.events import (
    DetectionResult,
    PreparationResult,
    StageEvent,
    StageFailure,
    TranscriptionResult,
)
from transcoder.pipeline.job import PipelineJob, Stage
from transcoder.pipeline.reporting import ConsoleReporter, StageReporter
from transcoder.preparation.client import PreparationClient, PreparedAudio
from transcoder.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)


# ── pure helpers ──────────────────────────────────────────────────────────────


def is_usable_payload(payload: Any) -> bool:
    """A stage result counts only if it is non-blank JSON text."""
    match payload:
        case str() as text if text.strip():
            try:
                json.loads(text)
            except ValueError:
                return False
            return True
        case _:
            return False


def _preparation_event(result: Any) -> PreparationResult:
    match result:
        case PreparedAudio(payload=payload, output=output):
            return PreparationResult(payload, output)
        case _:
            return PreparationResult(result)


# ── orchestrator ──────────────────────────────────────────────────────────────


class PipelineOrchestrator:
    """Sequences the three stage collaborators for one job at a time."""

    def __init__(
        self,
        options: Options,
        detector: FormatDetectionClient,
        preparer: PreparationClient,
        transcriber: TranscriptionClient,
        reporter: StageReporter | None = None,
    ) -> None:
        self._options = options
        self._detector = detector
        self._preparer = preparer
        self._transcriber = transcriber
        self._reporter = reporter or ConsoleReporter()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._queue: asyncio.Queue[StageEvent] | None = None
        self._pump: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()

    # ── public surface ────────────────────────────────────────────────────────

    async def run(self, job: PipelineJob) -> PipelineJob:
        """Start ``job`` and wait until it is terminal."""
        self.start(job)
        return await self.wait()

    async def wait(self) -> PipelineJob:
        """Wait for the job passed to the last :meth:`start` to finish."""
        match self._pump:
            case None:
                raise RuntimeError(MSG_ERR_NOT_STARTED)
            case pump:
                return await pump

    def start(self, job: PipelineJob) -> None:
        """Move an idle job into detection. Returns without waiting for the detector.

        Must be called from a running event loop; completion events are
        processed on that loop until the job is terminal, whether or not
        anyone awaits :meth:`wait`.
        """
        match job.stage:
            case Stage.IDLE:
                pass
            case stage:
                raise InvalidTransition(MSG_ERR_NOT_IDLE % stage.value)
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._pump = self._loop.create_task(self._drain(job, self._queue))

        try:
            self._options.validate()
        except ConfigError as exc:
            self._fail(job, StageFailure(job.stage, str(exc)))
            return
        self._enter(job, Stage.DETECTING)
        self._launch(
            Stage.DETECTING,
            lambda: self._detector.discover_audio_format(job.source),
            DetectionResult,
        )

    def notify(self, event: StageEvent) -> None:
        """Post a completion event. Safe to call from any thread."""
        match (self._loop, self._queue):
            case (None, _) | (_, None):
                raise RuntimeError(MSG_ERR_NOT_STARTED)
            case (loop, queue):
                loop.call_soon_threadsafe(queue.put_nowait, event)

    async def _drain(self, job: PipelineJob, queue: asyncio.Queue) -> PipelineJob:
        while not job.is_terminal:
            self._handle(job, await queue.get())
        return job

    # ── state machine ─────────────────────────────────────────────────────────

    def _handle(self, job: PipelineJob, event: StageEvent) -> None:
        match (job.stage, event):
            case (current, StageFailure(stage=failed)) if failed is current:
                self._fail(job, event)

            case (Stage.DETECTING, DetectionResult(payload=payload)) if is_usable_payload(payload):
                job.detected_format = payload
                self._reporter.report(event)
                self._enter(job, Stage.PREPARING)
                self._launch(
                    Stage.PREPARING,
                    lambda: self._preparer.start_preparation_pipeline(job.source),
                    _preparation_event,
                )

            case (Stage.PREPARING, PreparationResult(payload=payload, output=output)) if is_usable_payload(payload):
                job.preparation = payload
                job.prepared_output = output
                self._reporter.report(event)
                self._enter(job, Stage.TRANSCRIBING)
                source = output or job.source
                self._launch(
                    Stage.TRANSCRIBING,
                    lambda: self._transcriber.start_transcription(self._options, source),
                    TranscriptionResult,
                )

            case (Stage.TRANSCRIBING, TranscriptionResult(payload=payload)) if is_usable_payload(payload):
                job.result = payload
                self._enter(job, Stage.COMPLETED)
                self._reporter.report(event)

            case (current, DetectionResult() | PreparationResult() | TranscriptionResult()) if event.stage is current:
                self._fail(job, StageFailure(current, MSG_ERR_EMPTY_PAYLOAD % current.value))

            case (current, _):
                logger.warning(MSG_STALE_EVENT, type(event).__name__, current.value)

    def _enter(self, job: PipelineJob, target: Stage) -> None:
        logger.info(MSG_STAGE_ENTER, job.stage.value, target.value)
        job.advance(target)

    def _fail(self, job: PipelineJob, failure: StageFailure) -> None:
        logger.error(MSG_JOB_FAILED, job.source, failure.reason)
        job.fail(failure.reason)
        self._reporter.report(failure)

    # ── collaborator plumbing ─────────────────────────────────────────────────

    def _launch(
        self,
        stage: Stage,
        call: Callable[[], Awaitable[Any]],
        to_event: Callable[[Any], StageEvent],
    ) -> None:
        try:
            task = asyncio.ensure_future(call())
        except Exception as exc:
            self.notify(StageFailure(stage, MSG_ERR_COLLABORATOR % (stage.value, exc)))
            return
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._on_done(stage, t, to_event))

    def _on_done(
        self,
        stage: Stage,
        task: asyncio.Future,
        to_event: Callable[[Any], StageEvent],
    ) -> None:
        self._tasks.discard(task)
        match task:
            case t if t.cancelled():
                event: StageEvent = StageFailure(stage, MSG_ERR_COLLABORATOR % (stage.value, "cancelled"))
            case t if t.exception() is not None:
                exc = t.exception()
                logger.debug("Collaborator error in %s", stage.value, exc_info=exc)
                event = StageFailure(stage, MSG_ERR_COLLABORATOR % (stage.value, exc))
            case t:
                event = to_event(t.result())
        self.notify(event)
