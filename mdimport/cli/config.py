"""Configuration management for the mdimport CLI.

Handles persistent storage of Contentful settings and credentials in a
cross-platform config directory. Supports environment variables as
fallback/override.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, Field

# Cross-platform config directory
# Linux: ~/.config/mdimport
# macOS: ~/Library/Application Support/mdimport
# Windows: C:\\Users\\<user>\\AppData\\Local\\mdimport
CONFIG_DIR = Path(user_config_dir("mdimport", appauthor=False))

CONFIG_FILE = CONFIG_DIR / "config.yaml"
CREDENTIALS_FILE = CONFIG_DIR / "credentials.yaml"

SPACE_ID_ENV = "CONTENTFUL_SPACE_ID"
ENVIRONMENT_ID_ENV = "CONTENTFUL_ENVIRONMENT_ID"
MANAGEMENT_TOKEN_ENV = "CONTENTFUL_MANAGEMENT_TOKEN"


class CredentialsConfig(BaseModel):
    """Credentials stored separately with restricted permissions."""

    management_token: str | None = Field(
        default=None, description="Contentful content management token"
    )


class ContentfulConfig(BaseModel):
    """Target space and entry settings."""

    space_id: str | None = Field(default=None, description="Contentful space ID")
    environment_id: str = Field(default="master", description="Contentful environment ID")
    content_type: str = Field(default="post", description="Content type of generated entries")
    locale: str = Field(default="en-US", description="Locale of generated field values")
    publish: bool = Field(default=True, description="Publish entries on import")


class ValidationConfig(BaseModel):
    """Thresholds for the advisory checks."""

    max_line_length: int = Field(default=120, ge=1, description="Long line threshold")
    long_line_limit: int = Field(
        default=10, ge=0, description="Report long lines once there are more than this"
    )


class FetchConfig(BaseModel):
    """Download settings."""

    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")


class OutputConfig(BaseModel):
    """Output settings."""

    format: str = Field(default="text", description="Output format (text, json)")
    directory: str = Field(default="outputs", description="Directory for generated files")
    import_file: str = Field(default="import.json", description="Import document file name")
    errors_file: str = Field(
        default="validation-errors.csv", description="Validation error export file name"
    )
    color: bool = Field(default=True, description="Enable colored output")
    verbose: bool = Field(default=False, description="Verbose output")


class CLIConfig(BaseModel):
    """Complete CLI configuration."""

    contentful: ContentfulConfig = Field(default_factory=ContentfulConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def import_path(self) -> Path:
        return Path(self.output.directory) / self.output.import_file

    @property
    def errors_path(self) -> Path:
        return Path(self.output.errors_file)


def ensure_config_dir() -> None:
    """Create config directory if it doesn't exist."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)


def load_credentials() -> CredentialsConfig:
    """Load credentials from file or environment.

    Environment variables take precedence over stored credentials.
    """
    creds = CredentialsConfig()

    if CREDENTIALS_FILE.exists():
        try:
            with open(CREDENTIALS_FILE) as f:
                data = yaml.safe_load(f) or {}
                creds = CredentialsConfig(**data)
        except (yaml.YAMLError, ValueError):
            pass  # Use defaults if file is corrupted

    env_token = os.environ.get(MANAGEMENT_TOKEN_ENV)
    if env_token:
        creds.management_token = env_token

    return creds


def save_credentials(creds: CredentialsConfig) -> None:
    """Save credentials to file with restricted permissions."""
    ensure_config_dir()

    with open(CREDENTIALS_FILE, "w") as f:
        yaml.dump(creds.model_dump(exclude_none=True), f, default_flow_style=False)

    # Restrict permissions (Unix only)
    try:
        os.chmod(CREDENTIALS_FILE, 0o600)
    except (OSError, AttributeError):
        pass  # Windows doesn't support chmod the same way


def load_config() -> CLIConfig:
    """Load configuration from file."""
    if not CONFIG_FILE.exists():
        return CLIConfig()

    try:
        with open(CONFIG_FILE) as f:
            data = yaml.safe_load(f) or {}
            return CLIConfig(**data)
    except (yaml.YAMLError, ValueError):
        return CLIConfig()


def save_config(config: CLIConfig) -> None:
    """Save configuration to file."""
    ensure_config_dir()

    with open(CONFIG_FILE, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False)


def get_management_token(override: str | None = None) -> str | None:
    """Get management token with priority: override > env > stored.

    Args:
        override: Explicit token from command line

    Returns:
        Token or None if not configured
    """
    if override:
        return override

    return load_credentials().management_token


def get_effective_config(
    space_id: str | None = None,
    environment_id: str | None = None,
    content_type: str | None = None,
    locale: str | None = None,
    publish: bool | None = None,
    output_format: str | None = None,
    timeout: float | None = None,
) -> CLIConfig:
    """Get effective config with environment and command-line overrides applied.

    Priority is command line > environment > config file > defaults.

    Args:
        space_id: Override Contentful space ID
        environment_id: Override Contentful environment ID
        content_type: Override content type of generated entries
        locale: Override locale of generated field values
        publish: Override publish-on-import
        output_format: Override output format
        timeout: Override download timeout

    Returns:
        Effective configuration
    """
    config = load_config()

    env_space = os.environ.get(SPACE_ID_ENV)
    if env_space:
        config.contentful.space_id = env_space
    env_environment = os.environ.get(ENVIRONMENT_ID_ENV)
    if env_environment:
        config.contentful.environment_id = env_environment

    if space_id:
        config.contentful.space_id = space_id
    if environment_id:
        config.contentful.environment_id = environment_id
    if content_type:
        config.contentful.content_type = content_type
    if locale:
        config.contentful.locale = locale
    if publish is not None:
        config.contentful.publish = publish
    if output_format:
        if output_format not in ("text", "json"):
            raise ValueError(f"Invalid output format: {output_format}. Must be 'text' or 'json'")
        config.output.format = output_format
    if timeout is not None:
        config.fetch.timeout = timeout

    return config


def update_config(key: str, value: Any) -> None:
    """Update a specific config value.

    Args:
        key: Dot-notation key (e.g., "contentful.space_id", "fetch.timeout")
        value: New value
    """
    config = load_config()

    parts = key.split(".")
    if len(parts) == 1:
        # Top-level key not supported for safety
        raise ValueError(f"Invalid config key: {key}")
    elif len(parts) == 2:
        section, field = parts
        if section not in CLIConfig.model_fields:
            raise ValueError(f"Unknown section: {section}")
        section_obj = getattr(config, section)
        if field not in type(section_obj).model_fields:
            raise ValueError(f"Unknown field: {field} in {section}")
        # Type coercion for common types
        current = getattr(section_obj, field)
        if isinstance(current, bool):
            value = str(value).lower() in ("true", "1", "yes")
        elif isinstance(current, int):
            value = int(value)
        elif isinstance(current, float):
            value = float(value)
        setattr(section_obj, field, value)
    else:
        raise ValueError(f"Invalid config key format: {key}")

    save_config(config)


def clear_credentials() -> None:
    """Remove stored credentials."""
    if CREDENTIALS_FILE.exists():
        CREDENTIALS_FILE.unlink()


def get_config_paths() -> dict[str, Path]:
    """Get paths to config files for debugging."""
    return {
        "config_dir": CONFIG_DIR,
        "config_file": CONFIG_FILE,
        "credentials_file": CREDENTIALS_FILE,
    }
