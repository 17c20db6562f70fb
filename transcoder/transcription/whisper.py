"""WhisperTranscriptionClient: OpenAI Whisper speech-to-text backend."""
import asyncio
import io
import json

from openai import AsyncOpenAI

from transcoder.audio_source import read_audio
from transcoder.config import Options
from transcoder.constants import (
    ENCODING_OGG_OPUS,
    MSG_ERR_WHISPER_ENCODING,
    WHISPER_FILENAME,
    WHISPER_MODEL,
)
from transcoder.errors import TranscriptionError
from transcoder.transcription.client import TranscriptionClient


class WhisperTranscriptionClient(TranscriptionClient):
    """Whisper cannot decode headerless PCM, so prepared audio must be Ogg/Opus."""

    def __init__(self, timeout: float = 120.0) -> None:
        self._timeout = timeout

    async def start_transcription(self, options: Options, source: str) -> str:
        match options.audio_encoding:
            case encoding if encoding != ENCODING_OGG_OPUS:
                raise TranscriptionError(MSG_ERR_WHISPER_ENCODING % (ENCODING_OGG_OPUS, encoding))
            case _:
                pass

        client = AsyncOpenAI(api_key=options.auth_token, timeout=self._timeout)
        audio_file = io.BytesIO(await asyncio.to_thread(read_audio, source))
        audio_file.name = WHISPER_FILENAME
        response = await client.audio.transcriptions.create(
            model=WHISPER_MODEL,
            file=audio_file,
            language=options.language_code.split("-")[0].lower(),
        )
        return json.dumps({"text": response.text.strip()}, ensure_ascii=False)
