"""FormatDetectionClient: abstract base for media format detection."""
from abc import ABC, abstractmethod


class FormatDetectionClient(ABC):
    @abstractmethod
    async def discover_audio_format(self, source: str) -> str:
        """Inspect ``source`` and return a structured description. Raises on failure."""
        ...
