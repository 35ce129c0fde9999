"""
Settings for cmdorg.

Values are layered; each source overrides the ones before it:

    defaults
    ~/.config/cmdorg/config.toml
    ./cmdorg.toml or ./.cmdorgrc      (first one found)
    --config FILE
    CMDORG_<FIELD> environment variables
    command-line flags                 (see ``init_config``)
"""
import os
import tomli
import tomli_w
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple
from dataclasses import dataclass, field, fields, asdict


USER_CONFIG_PATH = Path("~/.config/cmdorg/config.toml")
LOCAL_CONFIG_NAMES = ("cmdorg.toml", ".cmdorgrc")
ENV_PREFIX = "CMDORG_"

_TRUE_WORDS = ("true", "1", "yes")


@dataclass
class CmdorgConfig:
    """Every tunable setting, with its default."""

    # Store
    database: str = field(default="commands.db")
    database_url: Optional[str] = field(default=None)  # wins over database when set
    database_echo: bool = field(default=False)
    connection_pool_size: int = field(default=1)
    connection_timeout: int = field(default=30)

    # Output
    output_format: str = field(default="table")  # table, json, plain
    exit_on_copy: bool = field(default=True)

    # Logging
    log_level: str = field(default="INFO")
    log_file: Optional[str] = field(default=None)

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        """Names of the settings, in declaration order."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> "CmdorgConfig":
        """Build a config from every file source, then the environment."""
        config = cls()
        for path in cls._file_sources(config_file):
            config._merge(cls._load_toml(path))
        config._apply_env_vars()
        config._expand_paths()
        return config

    @classmethod
    def _file_sources(cls, config_file: Optional[Path]) -> List[Path]:
        sources = []
        user_path = cls.user_config_path()
        if user_path.exists():
            sources.append(user_path)

        local = next((Path.cwd() / name for name in LOCAL_CONFIG_NAMES
                      if (Path.cwd() / name).exists()), None)
        if local is not None:
            sources.append(local)

        if config_file and config_file.exists():
            sources.append(config_file)
        return sources

    @staticmethod
    def user_config_path() -> Path:
        return USER_CONFIG_PATH.expanduser()

    @staticmethod
    def _load_toml(path: Path) -> Dict[str, Any]:
        with open(path, "rb") as f:
            return tomli.load(f)

    def _merge(self, data: Dict[str, Any]):
        known = self.keys()
        for key, value in data.items():
            if key in known:
                setattr(self, key, value)

    def _apply_env_vars(self):
        known = self.keys()
        for name, value in os.environ.items():
            if not name.startswith(ENV_PREFIX):
                continue
            key = name[len(ENV_PREFIX):].lower()
            if key in known:
                self.set_value(key, value)

    def _expand_paths(self):
        for key in ("database", "log_file"):
            value = getattr(self, key)
            if isinstance(value, str):
                setattr(self, key, os.path.expanduser(os.path.expandvars(value)))

    def set_value(self, key: str, value: str):
        """
        Set a setting from text, converted to the type of its current value.

        Raises:
            KeyError: If ``key`` is not a setting
            ValueError: If ``value`` cannot be converted
        """
        if key not in self.keys():
            raise KeyError(key)
        current = getattr(self, key)
        if isinstance(current, bool):
            converted = value.lower() in _TRUE_WORDS
        elif isinstance(current, int):
            converted = int(value)
        else:
            converted = value
        setattr(self, key, converted)

    def save(self, path: Optional[Path] = None) -> Path:
        """
        Write the settings as TOML (to the user config file by default).

        Unset optional settings are skipped since TOML has no null.
        """
        path = path or self.user_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {key: value for key, value in asdict(self).items() if value is not None}
        with open(path, "wb") as f:
            tomli_w.dump(data, f)
        return path

    def get_database_path(self) -> Path:
        """``database`` as an absolute path, relative ones taken from the cwd."""
        path = Path(self.database)
        return path if path.is_absolute() else Path.cwd() / path

    def get_database_url(self) -> str:
        return self.database_url or f"sqlite:///{self.get_database_path()}"


_config: Optional[CmdorgConfig] = None


def get_config(reload: bool = False, config_file: Optional[Path] = None) -> CmdorgConfig:
    """Return the process-wide config, loading it on first use or on request."""
    global _config
    if _config is None or reload or config_file:
        _config = CmdorgConfig.load(config_file)
    return _config


def init_config(database: Optional[str] = None, config_file: Optional[Path] = None, **kwargs) -> CmdorgConfig:
    """
    Reload the config and apply command-line overrides.

    ``database`` replaces any configured ``database_url``. Other keyword
    overrides are applied when not None.
    """
    config = get_config(reload=True, config_file=config_file)

    if database:
        config.database = os.path.expanduser(database)
        config.database_url = None

    known = config.keys()
    for key, value in kwargs.items():
        if key in known and value is not None:
            setattr(config, key, value)

    return config
