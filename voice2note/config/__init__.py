"""YAML configuration loader and provider settings for Voice2Note."""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Any, Mapping, Optional
import logging

from ..errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"
DEFAULT_REQUEST_TIMEOUT = 120.0

# Built-in defaults per provider; anything in the YAML file overrides them.
PROVIDER_DEFAULTS: Dict[str, Dict[str, str]] = {
    "openai": {
        "base_url": "https://api.openai.com",
        "api_key_env": "OPENAI_API_KEY",
        "stt_model": "whisper-1",
        "formatting_model": "gpt-4o-mini",
    },
    "gemini": {
        "base_url": "https://generativelanguage.googleapis.com",
        "api_key_env": "GEMINI_API_KEY",
        "stt_model": "gemini-2.0-flash",
        "formatting_model": "gemini-2.0-flash",
    },
}


class Voice2NoteConfig:
    """Voice2Note configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, built-in defaults
                        and environment variables are used.
        """
        self.config_file = Path(config_path) if config_path else None

        if self.config_file is None:
            logger.info("No configuration file given, using defaults")
            self.config: Dict[str, Any] = {}
            return

        if not self.config_file.exists():
            raise ConfigError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read configuration: {e}") from e

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level")

        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        storage = config.get('storage')
        if isinstance(storage, dict) and 'output_directory' in storage:
            out_dir = storage['output_directory']
            if not os.path.isabs(out_dir):
                storage['output_directory'] = str(config_dir / out_dir)

        log_cfg = config.get('logging')
        if isinstance(log_cfg, dict) and 'file_path' in log_cfg:
            log_path = log_cfg['file_path']
            if not os.path.isabs(log_path):
                log_cfg['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'providers.stt').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_output_directory(self) -> str:
        """Get the directory recordings are written to."""
        out_dir = self.get('storage.output_directory', 'recordings')
        return str(Path(out_dir).absolute())


@dataclass(frozen=True)
class ProviderSettings:
    """Connection settings for one provider backend."""
    name: str
    base_url: str
    api_key: Optional[str] = field(default=None, repr=False)
    stt_model: str = ""
    formatting_model: str = ""
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


@dataclass(frozen=True)
class ProviderConfig:
    """Process-wide provider configuration, resolved once at startup.

    Provider names are kept as given; the selector maps unknown names to the
    default provider.
    """
    stt_provider: str = DEFAULT_PROVIDER
    formatting_provider: str = DEFAULT_PROVIDER
    providers: Mapping[str, ProviderSettings] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "providers", MappingProxyType(dict(self.providers)))

    def settings_for(self, name: str) -> ProviderSettings:
        """Return settings for a provider, falling back to built-in defaults."""
        if name in self.providers:
            return self.providers[name]
        defaults = PROVIDER_DEFAULTS[name]
        return ProviderSettings(
            name=name,
            base_url=defaults["base_url"],
            stt_model=defaults["stt_model"],
            formatting_model=defaults["formatting_model"],
        )

    @classmethod
    def from_config(cls, config: Voice2NoteConfig,
                    environ: Optional[Mapping[str, str]] = None) -> "ProviderConfig":
        """Build the provider configuration from YAML settings and the environment.

        An explicit ``api_key`` in the YAML file wins over the environment
        variable named by ``api_key_env``.
        """
        env = os.environ if environ is None else environ
        timeout = float(config.get('providers.request_timeout', DEFAULT_REQUEST_TIMEOUT))

        providers = {}
        for name, defaults in PROVIDER_DEFAULTS.items():
            section = config.get(f'providers.{name}', {}) or {}
            if not isinstance(section, dict):
                raise ConfigError(f"'providers.{name}' must be a mapping")
            merged = {**defaults, **section}

            api_key = merged.get('api_key')
            if not api_key and merged.get('api_key_env'):
                api_key = env.get(merged['api_key_env'])

            providers[name] = ProviderSettings(
                name=name,
                base_url=str(merged['base_url']).rstrip('/'),
                api_key=(api_key or "").strip() or None,
                stt_model=str(merged['stt_model']),
                formatting_model=str(merged['formatting_model']),
                request_timeout=float(merged.get('request_timeout', timeout)),
            )

        stt = str(config.get('providers.stt', DEFAULT_PROVIDER)).strip().lower()
        formatting = str(config.get('providers.formatting', DEFAULT_PROVIDER)).strip().lower()
        logger.info(f"Provider configuration: stt={stt}, formatting={formatting}")
        return cls(stt_provider=stt, formatting_provider=formatting, providers=providers)
