"""Tests for configuration loading."""

import json

import pytest

from uplift.config import UpliftConfig, load_config
from uplift.domain.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def no_strict_env(monkeypatch):
    monkeypatch.delenv("UPLIFT_STRICT", raising=False)


def _write(tmp_path, data) -> str:
    path = tmp_path / "uplift.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return str(path)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        config = load_config(tmp_path / "absent.json")

        assert config == UpliftConfig()
        assert config.rmax == 3
        assert config.state_dir == ".uplift"
        assert config.build_command == ("npx", "ng", "build")
        assert config.test_command == ("npx", "ng", "test", "--watch=false")

    def test_none_gives_defaults(self) -> None:
        assert load_config(None) == UpliftConfig()

    def test_values_are_read(self, tmp_path) -> None:
        path = _write(
            tmp_path,
            {
                "strict": True,
                "registry": "https://npm.example.com",
                "rmax": 5,
                "build_command": ["npm", "run", "build"],
            },
        )

        config = load_config(path)

        assert config.strict
        assert config.registry == "https://npm.example.com"
        assert config.rmax == 5
        assert config.build_command == ("npm", "run", "build")
        assert config.test_command == UpliftConfig().test_command

    def test_invalid_json(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_config(_write(tmp_path, "{strict: yes"))

    @pytest.mark.parametrize(
        "data",
        [
            {"rmax": 0},
            {"strict": "yes"},
            {"build_command": []},
            {"unknown_key": 1},
        ],
    )
    def test_schema_violations(self, tmp_path, data) -> None:
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(_write(tmp_path, data))

    def test_non_object_document(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError, match="Expected object"):
            load_config(_write(tmp_path, [1, 2]))


class TestStrictOverride:
    def test_env_forces_strict(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("UPLIFT_STRICT", "1")

        assert load_config(_write(tmp_path, {"strict": False})).strict
        assert load_config(None).strict

    def test_env_zero_does_not_force(self, monkeypatch) -> None:
        monkeypatch.setenv("UPLIFT_STRICT", "0")

        assert not load_config(None).strict
