"""All magic values live here, no inline literals anywhere else."""

# Option keys (command line and config file)
CFG_PARAM_CONFIG = "config"
CFG_PARAM_AUDIO_SOURCE = "audio-source"
CFG_PARAM_LANGUAGE = "language"
CFG_PARAM_AUDIO_ENCODING = "audio-encoding"
CFG_PARAM_SAMPLE_RATE = "sample-rate"
CFG_PARAM_MODEL = "model"
CFG_PARAM_AUTH_SCHEME = "auth-scheme"
CFG_PARAM_AUTH_TOKEN = "auth-token"
CFG_PARAM_FOLDER_ID = "folder-id"

REQUIRED_OPTIONS: tuple[str, ...] = (
    CFG_PARAM_CONFIG,
    CFG_PARAM_AUDIO_SOURCE,
    CFG_PARAM_LANGUAGE,
    CFG_PARAM_AUDIO_ENCODING,
    CFG_PARAM_SAMPLE_RATE,
    CFG_PARAM_MODEL,
    CFG_PARAM_AUTH_SCHEME,
    CFG_PARAM_AUTH_TOKEN,
)

# Command line needs at least config=… and audio-source=…
MIN_CLI_OPTIONS = 2
COMMENT_PREFIX = "#"
OPTION_DELIMITER = "="

# Audio encodings understood by the preparation and recognition stages
ENCODING_OGG_OPUS = "OGG_OPUS"
ENCODING_LINEAR16_PCM = "LINEAR16_PCM"
SUPPORTED_ENCODINGS: tuple[str, ...] = (ENCODING_OGG_OPUS, ENCODING_LINEAR16_PCM)

# SpeechKit v1 `format` query values
SPEECHKIT_FORMATS = {
    ENCODING_OGG_OPUS: "oggopus",
    ENCODING_LINEAR16_PCM: "lpcm",
}

# ffmpeg codec arguments and output extension per encoding
FFMPEG_CODEC_ARGS = {
    ENCODING_OGG_OPUS: ("-c:a", "libopus", "-f", "ogg"),
    ENCODING_LINEAR16_PCM: ("-c:a", "pcm_s16le", "-f", "s16le"),
}
PREPARED_EXTENSIONS = {
    ENCODING_OGG_OPUS: ".ogg",
    ENCODING_LINEAR16_PCM: ".pcm",
}
PREPARED_SUFFIX = ".prepared"

FFPROBE_ARGS: tuple[str, ...] = (
    "-v", "error",
    "-print_format", "json",
    "-show_format",
    "-show_streams",
)

# Runtime defaults (overridable from the environment)
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ASR_BACKEND = "speechkit"
ASR_BACKENDS: tuple[str, ...] = ("speechkit", "whisper")
DEFAULT_FFPROBE_PATH = "ffprobe"
DEFAULT_FFMPEG_PATH = "ffmpeg"
DEFAULT_DETECTION_TIMEOUT = "30"
DEFAULT_PREPARATION_TIMEOUT = "300"
DEFAULT_TRANSCRIPTION_TIMEOUT = "120"

# Speech recognition backends
SPEECHKIT_STT_URL = "https://stt.api.cloud.yandex.net/speech/v1/stt:recognize"
SPEECHKIT_MAX_ATTEMPTS = 3
WHISPER_MODEL = "whisper-1"
WHISPER_FILENAME = "audio.ogg"

# Source fetching
SOURCE_FETCH_TIMEOUT: float = 60.0
REMOTE_SCHEMES: tuple[str, ...] = ("http", "https")

# Log / user-facing messages
MSG_USAGE = "Usage: speechkit-transcoder config=<path_to_cfg_file> audio-source=<uri_to_audio>"
MSG_COMPLETED = "Completed."
MSG_ASR_RESULTS = "ASR results:"
MSG_PARSE_ERROR = "Error parsing config line: %r"
MSG_CONFIG_REQUIRED = "Config file option required: config=<path_to_cfg_file>"
MSG_CONFIG_NOT_FOUND = "Config file %s not found."
MSG_CONFIG_READ = "Read %d option(s) from %s"
MSG_ERR_TOO_FEW_ARGS = "At least %d key=value arguments are required"
MSG_ERR_BAD_ARGUMENT = "Malformed command-line argument: %r"
MSG_ERR_TOO_FEW_OPTIONS = "At least %d distinct options must be given on the command line"
MSG_ERR_CONFIG_FILE = "Could not read config file: %r"
MSG_ERR_MISSING_OPTIONS = "Missing required option(s): %s"
MSG_ERR_BAD_SAMPLE_RATE = "sample-rate must be a positive integer, got %r"
MSG_ERR_BAD_ENCODING = "audio-encoding must be one of %s, got %r"
MSG_ERR_BAD_BACKEND = "ASR_BACKEND must be one of %s"
MSG_ERR_BAD_TIMEOUT = "%s must be a positive number"
MSG_ERR_EMPTY_PAYLOAD = "%s stage returned an empty or unparseable result"
MSG_ERR_COLLABORATOR = "%s stage failed: %s"
MSG_ERR_WHISPER_ENCODING = "Whisper backend needs audio-encoding=%s, got %s"
MSG_ERR_NOT_STARTED = "No job has been started on this orchestrator"
MSG_ERR_NOT_IDLE = "Only idle jobs can be started, job is %s"
MSG_FORMAT_DETECTED = "Media format recognition completed: %s"
MSG_PREPARATION_DONE = "Audio preparation completed: %s"
MSG_STAGE_FAILED = "Pipeline failed during %s: %s"
MSG_STAGE_ENTER = "Stage %s → %s"
MSG_STALE_EVENT = "Ignoring %s received while %s"
MSG_JOB_FAILED = "Job for %s failed: %s"
