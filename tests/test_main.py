"""TDD: entry point tests written FIRST"""
import json

import pytest

from transcoder.config import RuntimeConfig
from transcoder.detection.client import FormatDetectionClient
from transcoder.detection.ffprobe import FFprobeFormatDetector
from transcoder.main import build_orchestrator, main, run_job
from transcoder.pipeline.job import Stage
from transcoder.pipeline.orchestrator import PipelineOrchestrator
from transcoder.preparation.client import PreparationClient, PreparedAudio
from transcoder.preparation.ffmpeg import FFmpegPreparationClient
from transcoder.transcription.client import TranscriptionClient
from transcoder.transcription.speechkit import SpeechKitTranscriptionClient
from transcoder.transcription.whisper import WhisperTranscriptionClient
from transcoder.bootstrap import bootstrap

CFG = (
    "language=en-US\n"
    "audio-encoding=OGG_OPUS\n"
    "sample-rate=48000\n"
    "model=general\n"
    "auth-scheme=Bearer\n"
    "auth-token=t0ken\n"
)


class StubDetector(FormatDetectionClient):
    async def discover_audio_format(self, source):
        return json.dumps({"format": "ogg"})


class StubPreparer(PreparationClient):
    def __init__(self, payload='{"ok": true}'):
        self._payload = payload

    async def start_preparation_pipeline(self, source):
        return PreparedAudio(self._payload, None)


class StubTranscriber(TranscriptionClient):
    async def start_transcription(self, options, source):
        return json.dumps({"result": "hello"})


def make_runtime(tmp_path, backend: str = "speechkit") -> RuntimeConfig:
    return RuntimeConfig(
        log_level="INFO",
        asr_backend=backend,
        ffprobe_path="ffprobe",
        ffmpeg_path="ffmpeg",
        work_dir=str(tmp_path),
        detection_timeout=1.0,
        preparation_timeout=1.0,
        transcription_timeout=1.0,
        speechkit_url="https://stt.example",
    )


@pytest.fixture
def cfg_file(tmp_path):
    path = tmp_path / "job.cfg"
    path.write_text(CFG)
    return path


@pytest.fixture
def quiet_env(monkeypatch, tmp_path):
    monkeypatch.setattr("transcoder.config.load_dotenv", lambda **_: None)
    monkeypatch.setattr("transcoder.main._setup_logging", lambda level: None)
    monkeypatch.delenv("ASR_BACKEND", raising=False)
    monkeypatch.setenv("WORK_DIR", str(tmp_path))
    return monkeypatch


def stub_orchestrator(preparer=None):
    def _build(options, runtime, reporter=None):
        return PipelineOrchestrator(
            options,
            StubDetector(),
            preparer or StubPreparer(),
            StubTranscriber(),
            reporter,
        )

    return _build


# ── wiring ────────────────────────────────────────────────────────────────────


def test_build_orchestrator_uses_speechkit_by_default(tmp_path, cfg_file):
    options = bootstrap([f"config={cfg_file}", "audio-source=file:///x.ogg"])

    orchestrator = build_orchestrator(options, make_runtime(tmp_path))

    assert isinstance(orchestrator._detector, FFprobeFormatDetector)
    assert isinstance(orchestrator._preparer, FFmpegPreparationClient)
    assert isinstance(orchestrator._transcriber, SpeechKitTranscriptionClient)


def test_build_orchestrator_whisper_backend(tmp_path, cfg_file):
    options = bootstrap([f"config={cfg_file}", "audio-source=file:///x.ogg"])

    orchestrator = build_orchestrator(options, make_runtime(tmp_path, "whisper"))

    assert isinstance(orchestrator._transcriber, WhisperTranscriptionClient)


def test_run_job_bootstrap_failure_never_detects(tmp_path, monkeypatch):
    monkeypatch.setattr("transcoder.main.build_orchestrator", pytest.fail)

    job = run_job(["config=/nowhere.cfg", "audio-source=file:///x.ogg"], make_runtime(tmp_path))

    assert job.stage is Stage.FAILED
    assert job.transitions == [(Stage.IDLE, Stage.FAILED)]
    assert "config file" in job.failure_reason


# ── main ──────────────────────────────────────────────────────────────────────


def test_main_completes_and_prints_result(quiet_env, cfg_file, capsys):
    quiet_env.setattr("transcoder.main.build_orchestrator", stub_orchestrator())

    code = main([f"config={cfg_file}", "audio-source=file:///x.ogg"])

    out = capsys.readouterr().out
    assert code == 0
    assert "ASR results:" in out
    assert '{"result": "hello"}' in out


def test_main_prints_usage_on_bad_invocation(quiet_env, capsys):
    code = main(["audio-source=file:///x.ogg"])

    captured = capsys.readouterr()
    assert code == 1
    assert "Usage" in captured.err
    assert captured.out == ""


def test_main_stage_failure_exits_non_zero(quiet_env, cfg_file, capsys):
    quiet_env.setattr("transcoder.main.build_orchestrator", stub_orchestrator(StubPreparer(payload="")))

    code = main([f"config={cfg_file}", "audio-source=file:///x.ogg"])

    captured = capsys.readouterr()
    assert code == 1
    assert "ASR results:" not in captured.out
    assert "Usage" not in captured.err


def test_main_rejects_bad_runtime_env(quiet_env, cfg_file):
    quiet_env.setenv("ASR_BACKEND", "kaldi")

    assert main([f"config={cfg_file}", "audio-source=file:///x.ogg"]) == 1


class FilePreparer(PreparationClient):
    def __init__(self, output_path):
        self._output_path = output_path

    async def start_preparation_pipeline(self, source):
        self._output_path.write_bytes(b"OggS")
        return PreparedAudio('{"ok": true}', self._output_path.as_uri())


def test_run_job_removes_prepared_audio(tmp_path, cfg_file, monkeypatch):
    prepared = tmp_path / "x-ab12.prepared.ogg"
    monkeypatch.setattr("transcoder.main.build_orchestrator", stub_orchestrator(FilePreparer(prepared)))

    job = run_job([f"config={cfg_file}", "audio-source=file:///x.ogg"], make_runtime(tmp_path))

    assert job.stage is Stage.COMPLETED
    assert job.prepared_output == prepared.as_uri()
    assert not prepared.exists()


def test_run_job_keeps_prepared_audio_outside_work_dir(tmp_path, cfg_file, monkeypatch):
    outside = tmp_path / "elsewhere" / "x.ogg"
    outside.parent.mkdir()
    work_dir = tmp_path / "work"
    monkeypatch.setattr("transcoder.main.build_orchestrator", stub_orchestrator(FilePreparer(outside)))

    run_job([f"config={cfg_file}", "audio-source=file:///x.ogg"], make_runtime(work_dir))

    assert outside.exists()


def test_main_bad_sample_rate_prints_usage(quiet_env, tmp_path, capsys):
    cfg = tmp_path / "bad.cfg"
    cfg.write_text(CFG.replace("sample-rate=48000", "sample-rate=²"), encoding="utf-8")

    code = main([f"config={cfg}", "audio-source=file:///x.ogg"])

    assert code == 1
    assert "Usage" in capsys.readouterr().err
