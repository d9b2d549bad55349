"""Configuration system using platformdirs for cross-platform paths."""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import platformdirs

APP_NAME = "micromanage"
APP_AUTHOR = "micromanage"

logger = logging.getLogger(__name__)

DEFAULT_WORKPLAN_DIR = ".micromanage"
DEFAULT_WORKPLAN_FILE = "workplan.json"


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Where the work plan snapshot lives (relative paths resolve against the cwd)
	workplan_dir: Path = field(default_factory=lambda: Path(DEFAULT_WORKPLAN_DIR))
	workplan_file_name: str = DEFAULT_WORKPLAN_FILE

	log_level: str = "INFO"

	# Derived paths
	workplan_path: Path = field(init=False)
	log_dir: Path = field(init=False)

	def __post_init__(self) -> None:
		self.workplan_path = self.workplan_dir / self.workplan_file_name
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create config, data and log directories. The workplan directory is created on first save."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)


def _apply_env_overrides(config: Config) -> Config:
	"""Apply MICROMANAGE_* environment variable overrides."""
	path_env = {
		"MICROMANAGE_CONFIG_DIR": "config_dir",
		"MICROMANAGE_DATA_DIR": "data_dir",
		"DATA_DIR": "workplan_dir",
		"MICROMANAGE_WORKPLAN_DIR": "workplan_dir",
	}
	for env_key, attr in path_env.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, Path(val).expanduser())

	# Later keys win
	for env_key in ("DATA_FILE_NAME", "MICROMANAGE_WORKPLAN_FILE"):
		val = os.getenv(env_key)
		if val:
			config.workplan_file_name = val

	level = os.getenv("LOG_LEVEL")
	if level:
		config.log_level = level.upper()

	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	try:
		with open(toml_path, "rb") as f:
			data = tomllib.load(f)
	except tomllib.TOMLDecodeError as e:
		logger.warning(f"Ignoring invalid {toml_path}: {e}")
		return config

	path_fields = {"config_dir", "data_dir", "workplan_dir"}
	derived = {"workplan_path", "log_dir"}
	for key, val in data.items():
		if key in derived or not hasattr(config, key):
			continue
		if key in path_fields:
			setattr(config, key, Path(os.path.expanduser(val)))
		else:
			setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	# Env first so MICROMANAGE_CONFIG_DIR picks the config.toml to read
	config = _apply_env_overrides(config)
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.ensure_dirs()
	return config
