"""FFprobeFormatDetector: media format detection via an ffprobe subprocess."""
import asyncio
import logging

from transcoder.audio_source import media_input
from transcoder.constants import DEFAULT_FFPROBE_PATH, FFPROBE_ARGS
from transcoder.detection.client import FormatDetectionClient
from transcoder.errors import DetectionError

logger = logging.getLogger(__name__)


class FFprobeFormatDetector(FormatDetectionClient):

    def __init__(self, ffprobe_path: str = DEFAULT_FFPROBE_PATH, timeout: float = 30.0) -> None:
        self._ffprobe = ffprobe_path
        self._timeout = timeout

    async def discover_audio_format(self, source: str) -> str:
        args = [self._ffprobe, *FFPROBE_ARGS, media_input(source)]
        logger.info("Probing %s…", source)
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise DetectionError(f"ffprobe timed out after {self._timeout}s") from None

        match process.returncode:
            case 0:
                return stdout.decode(errors="replace").strip() if stdout else ""
            case code:
                err = stderr.decode(errors="replace")[:200] if stderr else "Unknown error"
                raise DetectionError(f"ffprobe exited with {code}: {err}")
