"""PreparationClient: abstract base for audio normalization pipelines."""
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional


class PreparedAudio(NamedTuple):
    payload: str
    output: Optional[str] = None


class PreparationClient(ABC):
    @abstractmethod
    async def start_preparation_pipeline(self, source: str) -> PreparedAudio:
        """Transcode ``source`` and describe the result. Raises on failure.

        ``output`` is the identifier of the prepared audio, when one was written.
        """
        ...
