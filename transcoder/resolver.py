"""ConfigResolver: builds the option store from key=value lines."""
import logging
from collections.abc import Iterable

from transcoder.config import Options
from transcoder.constants import (
    COMMENT_PREFIX,
    MSG_CONFIG_NOT_FOUND,
    MSG_CONFIG_READ,
    MSG_CONFIG_REQUIRED,
    MSG_PARSE_ERROR,
    OPTION_DELIMITER,
)

logger = logging.getLogger(__name__)


class ConfigResolver:
    """Accumulates options from command-line tokens and config files.

    The store is mutable only while resolving; call :meth:`options` to get
    the frozen result that the pipeline runs on.
    """

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def parse_line(self, raw_line: str) -> bool:
        """Store one ``key=value`` line.

        Returns True only when the stored value is non-empty. Comment lines
        return False without touching the store.
        """
        line = raw_line.rstrip("\r\n")
        match line.lstrip():
            case "":
                logger.warning(MSG_PARSE_ERROR, raw_line)
                return False
            case stripped if stripped.startswith(COMMENT_PREFIX):
                return False
            case _:
                pass

        name, sep, value = line.partition(OPTION_DELIMITER)
        match (sep, value):
            case ("", _) | (_, ""):
                logger.warning(MSG_PARSE_ERROR, raw_line)
                return False
            case _:
                return self._add_option(name, value)

    def _add_option(self, name: str, value: str) -> bool:
        key = name.strip()
        self._store[key] = value.strip()
        return bool(self._store[key])

    def parse_source(self, lines: Iterable[str], *, strict: bool = False) -> int:
        """Apply :meth:`parse_line` to every line; return how many were accepted.

        With ``strict`` the scan stops at the first line that is not accepted.
        """
        accepted = 0
        for line in lines:
            match (self.parse_line(line), strict):
                case (True, _):
                    accepted += 1
                case (False, True):
                    break
                case (False, False):
                    pass
        return accepted

    def resolve(self, file_path: str | None) -> bool:
        """Read a config file into the store; False only if it cannot be opened."""
        match file_path:
            case None | "":
                logger.error(MSG_CONFIG_REQUIRED)
                return False
            case _:
                pass
        try:
            with open(file_path, encoding="utf-8-sig", errors="replace") as f:
                accepted = self.parse_source(f)
        except OSError:
            logger.error(MSG_CONFIG_NOT_FOUND, file_path)
            return False
        logger.debug(MSG_CONFIG_READ, accepted, file_path)
        return True

    def options(self) -> Options:
        return Options(self._store)
