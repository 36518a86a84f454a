"""
Configuration management for aliasgen.

The configuration is stored as a TOML file in the config directory
(ALIASGEN_CONFIG_DIR, or ~/.aliasgen). It holds the OpenAI credential,
the request parameters, and the body excerpt cap. Missing keys fall back
to the defaults below; supplied values always win.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import tomli_w


CONFIG_FILENAME = "aliasgen.toml"
CONFIG_VERSION = 1

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MAX_TOKENS = 200
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_BODY_CHARS = 2000

# Hosts allowed to receive the API key over plain HTTP
LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")

# Declension enumeration wants deterministic output; free-text alias
# discovery from the body benefits from some variety.
DEFAULT_TITLE_TEMPERATURE = 0.0
DEFAULT_BODY_TEMPERATURE = 0.7


def get_config_dir() -> Path:
    """Directory holding aliasgen.toml and the log files."""
    env_dir = os.environ.get("ALIASGEN_CONFIG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".aliasgen"


@dataclass
class AliasConfig:
    """Complete aliasgen configuration."""
    path: Path
    version: int = CONFIG_VERSION

    # [openai]
    api_key: str = ""
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT
    title_temperature: float = DEFAULT_TITLE_TEMPERATURE
    body_temperature: float = DEFAULT_BODY_TEMPERATURE

    # [prompt]
    max_body_chars: int = DEFAULT_MAX_BODY_CHARS

    # Key found in the environment rather than the file; never saved
    env_api_key: str = field(default="", repr=False, compare=False)

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    @property
    def credential(self) -> str:
        """The key to use: the configured one, else one from the environment."""
        return self.api_key or self.env_api_key

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def validate(self) -> None:
        """Raise ValueError if any setting is out of range."""
        if not isinstance(self.max_body_chars, int) or self.max_body_chars < 1:
            raise ValueError(
                f"max_body_chars must be a positive integer (got {self.max_body_chars!r})"
            )
        if not isinstance(self.max_tokens, int) or self.max_tokens < 1:
            raise ValueError(
                f"max_tokens must be a positive integer (got {self.max_tokens!r})"
            )
        for name in ("title_temperature", "body_temperature"):
            value = getattr(self, name)
            if not 0.0 <= float(value) <= 2.0:
                raise ValueError(f"{name} must be between 0 and 2 (got {value!r})")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive (got {self.timeout!r})")
        # The bearer token must not travel in cleartext to a remote host
        if not self.base_url.startswith("https://"):
            host = urlparse(self.base_url).hostname or ""
            if host not in LOCAL_HOSTS:
                raise ValueError(
                    f"base_url must use HTTPS unless it points at localhost (got {self.base_url!r})"
                )


def _env_api_key() -> str:
    return (
        os.environ.get("ALIASGEN_OPENAI_API_KEY")
        or os.environ.get("OPENAI_API_KEY")
        or ""
    )


def load_config(config_dir: Path | None = None) -> AliasConfig:
    """
    Load configuration, backfilling defaults for missing keys.

    A missing file is not an error: the defaults are returned.

    Raises:
        ValueError: If config is invalid or from a newer version
    """
    config_dir = Path(config_dir) if config_dir is not None else get_config_dir()
    config_path = config_dir / CONFIG_FILENAME

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

    version = data.get("aliasgen", {}).get("version", CONFIG_VERSION)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    openai = data.get("openai", {})
    prompt = data.get("prompt", {})

    config = AliasConfig(
        path=config_dir,
        version=version,
        api_key=str(openai.get("api_key", "")).strip(),
        model=openai.get("model", DEFAULT_MODEL),
        base_url=openai.get("base_url", DEFAULT_BASE_URL),
        max_tokens=openai.get("max_tokens", DEFAULT_MAX_TOKENS),
        timeout=float(openai.get("timeout", DEFAULT_TIMEOUT)),
        title_temperature=float(openai.get("title_temperature", DEFAULT_TITLE_TEMPERATURE)),
        body_temperature=float(openai.get("body_temperature", DEFAULT_BODY_TEMPERATURE)),
        max_body_chars=prompt.get("max_body_chars", DEFAULT_MAX_BODY_CHARS),
        env_api_key=_env_api_key(),
    )
    config.validate()
    return config


def save_config(config: AliasConfig) -> None:
    """
    Save configuration to the config directory.

    Creates the directory if it doesn't exist. The file holds a secret,
    so it is written with owner-only permissions.
    """
    config.validate()
    config.path.mkdir(parents=True, exist_ok=True)

    data = {
        "aliasgen": {
            "version": config.version,
        },
        "openai": {
            "api_key": config.api_key.strip(),
            "model": config.model,
            "base_url": config.base_url,
            "max_tokens": config.max_tokens,
            "timeout": config.timeout,
            "title_temperature": config.title_temperature,
            "body_temperature": config.body_temperature,
        },
        "prompt": {
            "max_body_chars": config.max_body_chars,
        },
    }

    fd = os.open(config.config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as f:
        tomli_w.dump(data, f)
