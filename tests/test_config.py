from pathlib import Path

from config import Config, get_migrations_dir, get_seed_dir, load_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_creates_default_file(self, tmp_path):
        """Test that a missing config file is written with defaults."""
        path = tmp_path / "config" / "canopy.toml"

        config = load_config(path)

        assert path.exists()
        assert config == Config.default()
        assert config.store_backend == "sqlite"

    def test_round_trip_default_file(self, tmp_path):
        """Test that the written default file loads back unchanged."""
        path = tmp_path / "canopy.toml"
        written = load_config(path)

        assert load_config(path) == written

    def test_partial_file_uses_defaults(self, tmp_path):
        """Test that missing sections fall back to defaults."""
        path = tmp_path / "canopy.toml"
        path.write_text(
            'base_dir = "/srv/canopy"\n'
            "[store]\n"
            'backend = "memory"\n'
        )

        config = load_config(path)

        assert config.base_dir == Path("/srv/canopy")
        assert config.db_path == Path("/srv/canopy/db/canopy.db")
        assert config.log_dir == Path("/srv/canopy/logs")
        assert config.log_level == "INFO"
        assert config.store_backend == "memory"
        assert config.seed_file == get_seed_dir() / "categories.json"

    def test_bundled_directories_exist(self):
        """Test that the migrations and seed directories ship with the code."""
        assert any(get_migrations_dir().glob("*.sql"))
        assert (get_seed_dir() / "categories.json").exists()
