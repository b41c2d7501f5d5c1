"""Tests for vbox_watch.config module."""

import pytest

from vbox_watch.config import WatchConfig, build_config, load_config_file


@pytest.fixture
def tmp_config(tmp_path):
    """Create a temporary config file."""
    config = tmp_path / "vbox-watch.toml"
    config.write_text(
        """
server = "dev-vm"
username = "dev"
password = "secret"
shell_script = "/home/dev/reload.sh"
path = "app"
delay = 250
ignore = ["node_modules", "dist*"]
"""
    )
    return config


class TestWatchConfig:
    """Tests for WatchConfig defaults."""

    def test_defaults(self):
        config = WatchConfig()
        assert config.root == "."
        assert config.delay_ms == 100
        assert config.ignore == ("node_modules", ".git", ".idea")
        assert config.vboxmanage == "VBoxManage"
        assert config.guest_shell == "/bin/bash"

    def test_frozen(self):
        config = WatchConfig()
        with pytest.raises(AttributeError):
            config.server = "other"

    def test_non_positive_delay(self):
        with pytest.raises(ValueError, match="positive"):
            WatchConfig(delay_ms=0)


class TestLoadConfigFile:
    """Tests for load_config_file function."""

    def test_load(self, tmp_config):
        values = load_config_file(tmp_config)

        assert values["server"] == "dev-vm"
        assert values["shell_script"] == "/home/dev/reload.sh"
        assert values["delay"] == 250
        assert values["ignore"] == "node_modules;dist*"

    def test_relative_path_resolved_against_config_dir(self, tmp_config):
        values = load_config_file(tmp_config)
        assert values["path"] == str(tmp_config.parent / "app")

    def test_unknown_keys_skipped(self, tmp_path, caplog):
        config = tmp_path / "c.toml"
        config.write_text('server = "vm"\ncolour = "blue"\n')

        values = load_config_file(config)

        assert values == {"server": "vm"}
        assert "Unknown key 'colour'" in caplog.text

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config_file(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("server = \n")

        with pytest.raises(ValueError, match="Failed to parse config file"):
            load_config_file(config)


class TestBuildConfig:
    """Tests for build_config function."""

    def test_defaults_when_nothing_given(self):
        assert build_config({}) == WatchConfig()

    def test_cli_values(self):
        config = build_config({"server": "vm", "delay": 300, "ignore": "dist;build", "path": "/srv/app"})

        assert config.server == "vm"
        assert config.delay_ms == 300
        assert config.ignore == ("dist", "build")
        assert config.root == "/srv/app"

    def test_cli_overrides_file(self, tmp_config):
        config = build_config(
            {"server": "other-vm", "delay": None, "username": None},
            load_config_file(tmp_config),
        )

        assert config.server == "other-vm"
        assert config.username == "dev"
        assert config.delay_ms == 250
        assert config.ignore == ("node_modules", "dist*")

    def test_empty_ignore_disables_patterns(self):
        assert build_config({"ignore": ""}).ignore == ()

    def test_bad_delay(self):
        with pytest.raises(ValueError, match="integer"):
            build_config({"delay": "soon"})

    @pytest.mark.parametrize("delay", [1.9, True, False])
    def test_bool_and_fractional_delay_rejected(self, delay):
        with pytest.raises(ValueError, match="integer"):
            build_config({"delay": delay})

    def test_integral_float_delay_accepted(self):
        assert build_config({"delay": 200.0}).delay_ms == 200

    def test_fractional_delay_from_config_file(self, tmp_path):
        config = tmp_path / "c.toml"
        config.write_text("delay = 1.9\n")

        with pytest.raises(ValueError, match="integer"):
            build_config({}, load_config_file(config))

    def test_zero_delay(self):
        with pytest.raises(ValueError):
            build_config({"delay": 0})
