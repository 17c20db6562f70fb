"""Bootstrap: turns command-line tokens plus the config file into validated Options."""
import logging
from collections.abc import Sequence

from transcoder.config import Options
from transcoder.constants import (
    CFG_PARAM_CONFIG,
    MIN_CLI_OPTIONS,
    MSG_ERR_BAD_ARGUMENT,
    MSG_ERR_CONFIG_FILE,
    MSG_ERR_TOO_FEW_ARGS,
    MSG_ERR_TOO_FEW_OPTIONS,
)
from transcoder.errors import ConfigError
from transcoder.resolver import ConfigResolver

logger = logging.getLogger(__name__)


def bootstrap(argv: Sequence[str], resolver: ConfigResolver | None = None) -> Options:
    """Resolve options or raise ConfigError.

    Command-line tokens are parsed first and must all be accepted; the config
    file named by ``config=`` is read afterwards, so its values win for keys
    given in both places.
    """
    resolver = resolver or ConfigResolver()

    match len(argv):
        case n if n < MIN_CLI_OPTIONS:
            raise ConfigError(MSG_ERR_TOO_FEW_ARGS % MIN_CLI_OPTIONS)
        case _:
            pass

    accepted = resolver.parse_source(argv, strict=True)
    match accepted == len(argv):
        case True:
            pass
        case False:
            raise ConfigError(MSG_ERR_BAD_ARGUMENT % argv[accepted])

    match len(resolver):
        case n if n < MIN_CLI_OPTIONS:
            raise ConfigError(MSG_ERR_TOO_FEW_OPTIONS % MIN_CLI_OPTIONS)
        case _:
            pass

    config_path = resolver.get(CFG_PARAM_CONFIG)
    match resolver.resolve(config_path):
        case True:
            pass
        case False:
            raise ConfigError(MSG_ERR_CONFIG_FILE % config_path)

    options = resolver.options().validate()
    logger.debug("Resolved %d option(s)", len(options))
    return options
