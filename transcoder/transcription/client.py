"""TranscriptionClient: abstract base for speech-recognition backends."""
from abc import ABC, abstractmethod

from transcoder.config import Options


class TranscriptionClient(ABC):
    @abstractmethod
    async def start_transcription(self, options: Options, source: str) -> str:
        """Recognize speech in ``source`` and return the result payload. Raises on failure.

        Language, encoding, sample rate, model and auth are read from ``options``.
        """
        ...
