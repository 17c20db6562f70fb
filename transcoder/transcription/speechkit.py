"""SpeechKitTranscriptionClient: Yandex SpeechKit synchronous recognition over REST."""
import asyncio
import logging

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from transcoder.audio_source import read_audio
from transcoder.config import Options
from transcoder.constants import (
    SPEECHKIT_FORMATS,
    SPEECHKIT_MAX_ATTEMPTS,
    SPEECHKIT_STT_URL,
)
from transcoder.errors import TranscriptionError
from transcoder.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)


def build_params(options: Options) -> dict[str, str]:
    params = {
        "lang": options.language_code,
        "topic": options.model,
        "format": SPEECHKIT_FORMATS[options.audio_encoding],
        "sampleRateHertz": str(options.sample_rate_hertz),
    }
    match options.folder_id:
        case str() as folder if folder:
            params["folderId"] = folder
        case _:
            pass
    return params


def build_headers(options: Options) -> dict[str, str]:
    return {"Authorization": f"{options.auth_scheme} {options.auth_token}"}


@retry(
    retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
    wait=wait_exponential(multiplier=1),
    stop=stop_after_attempt(SPEECHKIT_MAX_ATTEMPTS),
    reraise=True,
)
def call_stt(
    url: str,
    params: dict[str, str],
    headers: dict[str, str],
    audio: bytes,
    timeout: float,
) -> requests.Response:
    return requests.post(url, params=params, headers=headers, data=audio, timeout=timeout)


class SpeechKitTranscriptionClient(TranscriptionClient):

    def __init__(self, url: str = SPEECHKIT_STT_URL, timeout: float = 120.0) -> None:
        self._url = url
        self._timeout = timeout

    async def start_transcription(self, options: Options, source: str) -> str:
        audio = await asyncio.to_thread(read_audio, source)
        logger.info("Sending %d bytes to SpeechKit…", len(audio))
        response = await asyncio.to_thread(
            call_stt,
            self._url,
            build_params(options),
            build_headers(options),
            audio,
            self._timeout,
        )
        match response.status_code:
            case 200:
                return response.text.strip()
            case status:
                raise TranscriptionError(f"SpeechKit returned {status}: {response.text[:200]}")
