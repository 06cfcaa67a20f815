"""Configuration management for Canopy.

Reads configuration from ~/.config/canopy.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    store_backend: str
    seed_file: Path

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "canopy"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="canopy.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
            store_backend="sqlite",
            seed_file=get_seed_dir() / "categories.json",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "canopy.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def get_seed_dir() -> Path:
    """Get the path to the bundled seed data directory."""
    return Path(__file__).parent / "db" / "seed"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Args:
        config_path: Optional path to the TOML file. Defaults to
                     ~/.config/canopy.toml.

    Returns:
        Config object with loaded or default values.
    """
    config_path = config_path or get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "canopy"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "canopy.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    store_config = data.get("store", {})
    store_backend = store_config.get("backend", "sqlite")
    seed_file = Path(
        store_config.get("seed_file", get_seed_dir() / "categories.json")
    )

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        store_backend=store_backend,
        seed_file=seed_file,
    )


def _write_config(config: Config, config_path: Path) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
        config_path: Destination TOML file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "store": {
            "backend": config.store_backend,
            "seed_file": str(config.seed_file),
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
