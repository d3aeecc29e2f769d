"""Unit tests for Settings class and get_settings function."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dynamotree.config import get_settings, reload_settings
from dynamotree.config.models import DEFAULT_SPECIAL_CHARACTER, TreeConfig
from dynamotree.config.settings import Settings


class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self) -> None:
        settings = Settings()
        assert settings.tree.table_name == "dynamotree"
        assert settings.tree.special_character == DEFAULT_SPECIAL_CHARACTER
        assert settings.tree.batch_size == 25
        assert settings.tree.max_unprocessed_retries is None
        assert settings.storage.backend == "inmemory"
        assert settings.observability.logging.format == "json"


class TestTreeConfig:
    """Tests for TreeConfig validation."""

    def test_empty_special_character_uses_default(self) -> None:
        assert TreeConfig(special_character="").special_character == "¦"

    def test_batch_size_capped(self) -> None:
        with pytest.raises(ValidationError):
            TreeConfig(batch_size=26)

    def test_hops_positive(self) -> None:
        with pytest.raises(ValidationError):
            TreeConfig(max_link_hops=0)


class TestGetSettings:
    """Tests for get_settings function."""

    def test_reads_toml(self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (test_config_dir / "default.toml").write_text(
            '[tree]\ntable_name = "from-toml"\n\n[storage]\nbackend = "dynamodb"'
        )
        monkeypatch.setenv("DYNAMOTREE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("DYNAMOTREE_ENV", "nonexistent")

        settings = get_settings()
        assert settings.tree.table_name == "from-toml"
        assert settings.storage.backend == "dynamodb"

    def test_settings_cached(self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DYNAMOTREE_CONFIG_DIR", str(test_config_dir))
        assert get_settings() is get_settings()

    def test_reload_settings(self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        default_toml = test_config_dir / "default.toml"
        default_toml.write_text('[tree]\ntable_name = "original"')
        monkeypatch.setenv("DYNAMOTREE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("DYNAMOTREE_ENV", "nonexistent")

        assert get_settings().tree.table_name == "original"
        default_toml.write_text('[tree]\ntable_name = "updated"')
        assert reload_settings().tree.table_name == "updated"

    def test_nested_env_override(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (test_config_dir / "default.toml").write_text(
            '[tree]\ntable_name = "from-toml"\nbatch_size = 10'
        )
        monkeypatch.setenv("DYNAMOTREE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("DYNAMOTREE_ENV", "nonexistent")
        monkeypatch.setenv("DYNAMOTREE_TREE__TABLE_NAME", "from-env")

        settings = get_settings()
        assert settings.tree.table_name == "from-env"
        assert settings.tree.batch_size == 10

    def test_table_capacity_under_tree(
        self, test_config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (test_config_dir / "default.toml").write_text(
            '[tree]\nbilling_mode = "PAY_PER_REQUEST"\nread_capacity_units = 5'
        )
        monkeypatch.setenv("DYNAMOTREE_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("DYNAMOTREE_ENV", "nonexistent")

        tree = get_settings().tree
        assert tree.billing_mode == "PAY_PER_REQUEST"
        assert tree.read_capacity_units == 5
