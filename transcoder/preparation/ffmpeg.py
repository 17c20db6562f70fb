"""FFmpegPreparationClient: transcodes the source to the configured encoding.

The output is mono audio at the configured sample rate, encoded as OGG/Opus
or as raw 16-bit little-endian PCM, which are the two formats the recognizer
accepts. The prepared file lands in ``work_dir`` as
``<stem>-<token>.prepared.<ext>``, with a fresh token per run.
A failed or timed-out run removes whatever ffmpeg managed to write.
"""
import asyncio
import json
import logging
import uuid
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from transcoder.audio_source import media_input
from transcoder.config import Options
from transcoder.constants import (
    DEFAULT_FFMPEG_PATH,
    FFMPEG_CODEC_ARGS,
    PREPARED_EXTENSIONS,
    PREPARED_SUFFIX,
)
from transcoder.errors import PreparationError
from transcoder.preparation.client import PreparationClient, PreparedAudio

logger = logging.getLogger(__name__)


def prepared_path(source: str, work_dir: Path, encoding: str, token: str | None = None) -> Path:
    stem = PurePosixPath(urlparse(source).path).stem or "audio"
    token = token or uuid.uuid4().hex[:8]
    return work_dir / f"{stem}-{token}{PREPARED_SUFFIX}{PREPARED_EXTENSIONS[encoding]}"


class FFmpegPreparationClient(PreparationClient):

    def __init__(
        self,
        options: Options,
        work_dir: Path,
        ffmpeg_path: str = DEFAULT_FFMPEG_PATH,
        timeout: float = 300.0,
    ) -> None:
        self._encoding = options.audio_encoding
        self._sample_rate = options.sample_rate_hertz
        self._work_dir = work_dir
        self._ffmpeg = ffmpeg_path
        self._timeout = timeout

    def build_args(self, source: str, output: Path) -> list[str]:
        return [
            self._ffmpeg,
            "-y",
            "-i", media_input(source),
            "-ac", "1",
            "-ar", str(self._sample_rate),
            *FFMPEG_CODEC_ARGS[self._encoding],
            str(output),
        ]

    async def start_preparation_pipeline(self, source: str) -> PreparedAudio:
        self._work_dir.mkdir(parents=True, exist_ok=True)
        output = prepared_path(source, self._work_dir, self._encoding)
        logger.info("Transcoding %s → %s", source, output)
        process = await asyncio.create_subprocess_exec(
            *self.build_args(source, output),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            output.unlink(missing_ok=True)
            raise PreparationError(f"ffmpeg timed out after {self._timeout}s") from None

        match process.returncode:
            case 0:
                pass
            case code:
                err = stderr.decode(errors="replace")[-200:] if stderr else "Unknown error"
                output.unlink(missing_ok=True)
                raise PreparationError(f"ffmpeg exited with {code}: {err}")

        payload = json.dumps({
            "source": source,
            "output": str(output),
            "encoding": self._encoding,
            "sample_rate_hertz": self._sample_rate,
            "channels": 1,
        })
        return PreparedAudio(payload=payload, output=output.resolve().as_uri())
