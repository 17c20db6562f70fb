"""Entry point: wires argv → Options → collaborators → PipelineOrchestrator."""
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from transcoder.audio_source import local_path
from transcoder.bootstrap import bootstrap
from transcoder.config import Options, RuntimeConfig
from transcoder.constants import MSG_COMPLETED, MSG_USAGE
from transcoder.detection.ffprobe import FFprobeFormatDetector
from transcoder.errors import ConfigError
from transcoder.pipeline.job import PipelineJob, Stage
from transcoder.pipeline.orchestrator import PipelineOrchestrator
from transcoder.pipeline.reporting import StageReporter
from transcoder.preparation.ffmpeg import FFmpegPreparationClient
from transcoder.transcription.client import TranscriptionClient
from transcoder.transcription.speechkit import SpeechKitTranscriptionClient
from transcoder.transcription.whisper import WhisperTranscriptionClient

logger = logging.getLogger(__name__)


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(console=Console(stderr=True), rich_tracebacks=True))


def _make_transcriber(runtime: RuntimeConfig) -> TranscriptionClient:
    match runtime.asr_backend:
        case "whisper":
            return WhisperTranscriptionClient(timeout=runtime.transcription_timeout)
        case _:
            return SpeechKitTranscriptionClient(
                url=runtime.speechkit_url, timeout=runtime.transcription_timeout
            )


def _discard_prepared(job: PipelineJob, work_dir: Path) -> None:
    """Remove the prepared audio once the job is over, if it lives in ``work_dir``."""
    match job.prepared_output and local_path(job.prepared_output):
        case Path() as path if path.resolve().is_relative_to(work_dir.resolve()):
            path.unlink(missing_ok=True)
            logger.debug("Removed prepared audio %s", path)
        case _:
            pass


def build_orchestrator(
    options: Options,
    runtime: RuntimeConfig,
    reporter: StageReporter | None = None,
) -> PipelineOrchestrator:
    return PipelineOrchestrator(
        options,
        detector=FFprobeFormatDetector(runtime.ffprobe_path, timeout=runtime.detection_timeout),
        preparer=FFmpegPreparationClient(
            options,
            work_dir=Path(runtime.work_dir),
            ffmpeg_path=runtime.ffmpeg_path,
            timeout=runtime.preparation_timeout,
        ),
        transcriber=_make_transcriber(runtime),
        reporter=reporter,
    )


def run_job(
    argv: Sequence[str],
    runtime: RuntimeConfig,
    reporter: StageReporter | None = None,
) -> PipelineJob:
    """Bootstrap and run one job. Bootstrap failures fail the job before detection."""
    try:
        options = bootstrap(argv)
    except ConfigError as exc:
        logger.error("%s", exc)
        job = PipelineJob(source="")
        job.fail(str(exc))
        return job

    job = PipelineJob(source=options.audio_source)
    orchestrator = build_orchestrator(options, runtime, reporter)
    job = asyncio.run(orchestrator.run(job))
    _discard_prepared(job, Path(runtime.work_dir))
    return job


def main(argv: Sequence[str] | None = None) -> int:
    try:
        runtime = RuntimeConfig.from_env()
    except ConfigError as exc:
        _setup_logging("INFO")
        logger.error("%s", exc)
        return 1
    _setup_logging(runtime.log_level)

    args = list(sys.argv[1:] if argv is None else argv)
    job = run_job(args, runtime)

    match (job.stage, job.transitions):
        case (Stage.COMPLETED, _):
            logger.info(MSG_COMPLETED)
            return 0
        case (Stage.FAILED, [(Stage.IDLE, Stage.FAILED)]):
            print(MSG_USAGE, file=sys.stderr)
            return 1
        case _:
            return 1


if __name__ == "__main__":
    sys.exit(main())
