"""TDD: bootstrap tests written FIRST"""
import pytest

from transcoder.bootstrap import bootstrap
from transcoder.errors import ConfigError

RECOGNITION_LINES = (
    "language=en-US\n"
    "audio-encoding=OGG_OPUS\n"
    "sample-rate=48000\n"
    "model=general\n"
    "auth-scheme=Api-Key\n"
    "auth-token=secret\n"
)


@pytest.fixture
def cfg_file(tmp_path):
    path = tmp_path / "job.cfg"
    path.write_text("# recognition\n" + RECOGNITION_LINES)
    return path


def test_bootstrap_merges_cli_and_file(cfg_file):
    options = bootstrap([f"config={cfg_file}", "audio-source=file:///x.ogg"])

    assert options.audio_source == "file:///x.ogg"
    assert options.config_path == str(cfg_file)
    assert options.auth_scheme == "Api-Key"
    assert options.sample_rate_hertz == 48000


def test_bootstrap_file_wins_over_cli(cfg_file):
    options = bootstrap([f"config={cfg_file}", "audio-source=file:///x.ogg", "model=deferred-general"])

    assert options.model == "general"


def test_bootstrap_requires_two_arguments(cfg_file):
    with pytest.raises(ConfigError, match="At least 2"):
        bootstrap([f"config={cfg_file}"])


def test_bootstrap_stops_at_malformed_argument(cfg_file):
    with pytest.raises(ConfigError, match="Malformed"):
        bootstrap([f"config={cfg_file}", "audio-source", "model=general"])


def test_bootstrap_rejects_comment_argument(cfg_file):
    with pytest.raises(ConfigError, match="Malformed"):
        bootstrap([f"config={cfg_file}", "#audio-source=file:///x.ogg"])


def test_bootstrap_requires_two_distinct_options(cfg_file):
    with pytest.raises(ConfigError, match="distinct"):
        bootstrap([f"config={cfg_file}", f"config={cfg_file}"])


def test_bootstrap_missing_config_file(tmp_path):
    with pytest.raises(ConfigError, match="config file"):
        bootstrap([f"config={tmp_path / 'missing.cfg'}", "audio-source=file:///x.ogg"])


def test_bootstrap_requires_config_option(cfg_file):
    with pytest.raises(ConfigError, match="config file"):
        bootstrap(["audio-source=file:///x.ogg", "model=general"])


def test_bootstrap_validates_merged_options(tmp_path):
    cfg = tmp_path / "partial.cfg"
    cfg.write_text("language=en-US\nmodel=general\n#comment\nsample-rate=48000")

    with pytest.raises(ConfigError, match="auth-token"):
        bootstrap([f"config={cfg}", "audio-source=file:///x.ogg"])
