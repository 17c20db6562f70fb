from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional
import os
import tempfile

from dotenv import load_dotenv

from transcoder.constants import (
    ASR_BACKENDS,
    CFG_PARAM_AUDIO_ENCODING,
    CFG_PARAM_AUDIO_SOURCE,
    CFG_PARAM_AUTH_SCHEME,
    CFG_PARAM_AUTH_TOKEN,
    CFG_PARAM_CONFIG,
    CFG_PARAM_FOLDER_ID,
    CFG_PARAM_LANGUAGE,
    CFG_PARAM_MODEL,
    CFG_PARAM_SAMPLE_RATE,
    DEFAULT_ASR_BACKEND,
    DEFAULT_DETECTION_TIMEOUT,
    DEFAULT_FFMPEG_PATH,
    DEFAULT_FFPROBE_PATH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PREPARATION_TIMEOUT,
    DEFAULT_TRANSCRIPTION_TIMEOUT,
    MSG_ERR_BAD_BACKEND,
    MSG_ERR_BAD_ENCODING,
    MSG_ERR_BAD_SAMPLE_RATE,
    MSG_ERR_BAD_TIMEOUT,
    MSG_ERR_MISSING_OPTIONS,
    REQUIRED_OPTIONS,
    SPEECHKIT_STT_URL,
    SUPPORTED_ENCODINGS,
)
from transcoder.errors import ConfigError


@dataclass(frozen=True)
class Options:
    """Resolved job options. Built once by the resolver, read-only afterwards."""

    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def __len__(self) -> int:
        return len(self.values)

    def as_dict(self) -> dict[str, str]:
        return dict(self.values)

    @property
    def config_path(self) -> str:
        return self.values.get(CFG_PARAM_CONFIG, "")

    @property
    def audio_source(self) -> str:
        return self.values.get(CFG_PARAM_AUDIO_SOURCE, "")

    @property
    def language_code(self) -> str:
        return self.values.get(CFG_PARAM_LANGUAGE, "")

    @property
    def audio_encoding(self) -> str:
        return self.values.get(CFG_PARAM_AUDIO_ENCODING, "").upper()

    @property
    def sample_rate_hertz(self) -> int:
        return int(self.values.get(CFG_PARAM_SAMPLE_RATE, "0"))

    @property
    def model(self) -> str:
        return self.values.get(CFG_PARAM_MODEL, "")

    @property
    def auth_scheme(self) -> str:
        return self.values.get(CFG_PARAM_AUTH_SCHEME, "")

    @property
    def auth_token(self) -> str:
        return self.values.get(CFG_PARAM_AUTH_TOKEN, "")

    @property
    def folder_id(self) -> Optional[str]:
        return self.values.get(CFG_PARAM_FOLDER_ID) or None

    def validate(self) -> "Options":
        """Raise ConfigError unless every required option is usable."""
        missing = [key for key in REQUIRED_OPTIONS if not self.values.get(key)]
        match missing:
            case []:
                pass
            case keys:
                raise ConfigError(MSG_ERR_MISSING_OPTIONS % ", ".join(keys))

        raw_rate = self.values[CFG_PARAM_SAMPLE_RATE]
        match raw_rate.isdecimal() and int(raw_rate) > 0:
            case True:
                pass
            case False:
                raise ConfigError(MSG_ERR_BAD_SAMPLE_RATE % raw_rate)

        match self.audio_encoding in SUPPORTED_ENCODINGS:
            case True:
                pass
            case False:
                raise ConfigError(
                    MSG_ERR_BAD_ENCODING
                    % (", ".join(SUPPORTED_ENCODINGS), self.values[CFG_PARAM_AUDIO_ENCODING])
                )
        return self


def _positive_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(MSG_ERR_BAD_TIMEOUT % name) from None
    match value > 0:
        case True:
            return value
        case False:
            raise ConfigError(MSG_ERR_BAD_TIMEOUT % name)


@dataclass(frozen=True)
class RuntimeConfig:
    log_level: str
    asr_backend: str
    ffprobe_path: str
    ffmpeg_path: str
    work_dir: str
    detection_timeout: float
    preparation_timeout: float
    transcription_timeout: float
    speechkit_url: str

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        load_dotenv()

        log_level = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
        asr_backend = os.getenv("ASR_BACKEND", DEFAULT_ASR_BACKEND).strip().lower()
        ffprobe_path = os.getenv("FFPROBE_PATH") or DEFAULT_FFPROBE_PATH
        ffmpeg_path = os.getenv("FFMPEG_PATH") or DEFAULT_FFMPEG_PATH
        work_dir = os.getenv("WORK_DIR") or tempfile.gettempdir()
        detection_timeout = os.getenv("DETECTION_TIMEOUT", DEFAULT_DETECTION_TIMEOUT)
        preparation_timeout = os.getenv("PREPARATION_TIMEOUT", DEFAULT_PREPARATION_TIMEOUT)
        transcription_timeout = os.getenv("TRANSCRIPTION_TIMEOUT", DEFAULT_TRANSCRIPTION_TIMEOUT)
        speechkit_url = os.getenv("SPEECHKIT_URL") or SPEECHKIT_STT_URL

        return cls._validate(
            log_level=log_level,
            asr_backend=asr_backend,
            ffprobe_path=ffprobe_path,
            ffmpeg_path=ffmpeg_path,
            work_dir=work_dir,
            detection_timeout=_positive_float("DETECTION_TIMEOUT", detection_timeout),
            preparation_timeout=_positive_float("PREPARATION_TIMEOUT", preparation_timeout),
            transcription_timeout=_positive_float("TRANSCRIPTION_TIMEOUT", transcription_timeout),
            speechkit_url=speechkit_url,
        )

    @staticmethod
    def _validate(
        log_level: str,
        asr_backend: str,
        ffprobe_path: str,
        ffmpeg_path: str,
        work_dir: str,
        detection_timeout: float,
        preparation_timeout: float,
        transcription_timeout: float,
        speechkit_url: str,
    ) -> "RuntimeConfig":
        match asr_backend:
            case b if b in ASR_BACKENDS:
                pass
            case _:
                raise ConfigError(MSG_ERR_BAD_BACKEND % ", ".join(ASR_BACKENDS))

        return RuntimeConfig(
            log_level=log_level,
            asr_backend=asr_backend,
            ffprobe_path=ffprobe_path,
            ffmpeg_path=ffmpeg_path,
            work_dir=work_dir,
            detection_timeout=detection_timeout,
            preparation_timeout=preparation_timeout,
            transcription_timeout=transcription_timeout,
            speechkit_url=speechkit_url,
        )
