"""Configuration models."""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from bash_helpers.config.exceptions import InvalidConfigurationError

ENV_FILES = [".env.bashhelpers", ".env"]


class HelperConfig(BaseSettings):
    """Configuration for bash-helpers.

    Built once at startup and handed to every helper, so no command reads
    or mutates the shell environment on its own.
    """

    # Git settings
    remote_name: str = Field(
        default="origin",
        description="Remote whose branches decide which local branches survive",
    )
    protect_current_branch: bool = Field(
        default=True,
        description="Never delete the checked-out branch when pruning",
    )

    # Trash settings
    trash_command: list[str] = Field(
        default_factory=lambda: ["gio", "trash"],
        description="Command that moves a file to the trash (file path is appended)",
    )
    default_trash_extension: str = Field(
        default="txt",
        description="Extension used by 'trash' when none is given",
    )

    # System cleanup settings
    use_sudo: bool = Field(
        default=True,
        description="Prefix privileged cleanup commands with sudo",
    )
    log_dir: Path = Field(
        default=Path("/var/log"),
        description="Directory whose *.log files are truncated by clean-system",
    )

    model_config = SettingsConfigDict(
        env_file=ENV_FILES,
        env_file_encoding="utf-8",
        env_prefix="BASH_HELPERS_",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(
        self,
        _env_file: str | Path | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize configuration with optional custom env file.

        Args:
            _env_file: Path to custom environment file. If provided, only this file
                is used instead of the default .env.bashhelpers/.env files.
            **kwargs: Additional keyword arguments passed to BaseSettings

        Raises:
            InvalidConfigurationError: If the custom env file does not exist
        """
        env_file = kwargs.pop("env_file", _env_file)

        if env_file is not None:
            env_path = Path(env_file)
            if not env_path.exists():
                raise InvalidConfigurationError(f"Environment file not found: {env_file}")
            kwargs["_custom_env_file"] = env_path

        super().__init__(**kwargs)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Swap the default dotenv source for the custom env file when one was given.

        Args:
            settings_cls: The settings class being instantiated
            init_settings: Settings from __init__ arguments
            env_settings: Settings from environment variables
            dotenv_settings: Settings from .env files
            file_secret_settings: Settings from secret files

        Returns:
            Tuple of settings sources in priority order
        """
        init_kwargs = init_settings.init_kwargs  # type: ignore[attr-defined]
        custom_env_path = init_kwargs.get("_custom_env_file")

        if custom_env_path is not None:
            custom_dotenv = DotEnvSettingsSource(
                settings_cls,
                env_file=custom_env_path,
                env_file_encoding="utf-8",
            )
            return (init_settings, env_settings, custom_dotenv, file_secret_settings)

        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    @field_validator("remote_name")
    @classmethod
    def validate_remote_name(cls, v: str) -> str:
        """Strip whitespace and reject empty remote names.

        Args:
            v: Remote name

        Returns:
            Normalized remote name

        Raises:
            InvalidConfigurationError: If the remote name is empty
        """
        v = v.strip()
        if not v:
            raise InvalidConfigurationError("Remote name must not be empty")
        return v

    @field_validator("trash_command")
    @classmethod
    def validate_trash_command(cls, v: list[str]) -> list[str]:
        """Ensure the trash command names an executable.

        Args:
            v: Trash command argument list

        Returns:
            The command

        Raises:
            InvalidConfigurationError: If the command is empty
        """
        if not v or not v[0].strip():
            raise InvalidConfigurationError("Trash command must not be empty")
        return v

    @field_validator("default_trash_extension")
    @classmethod
    def validate_default_extension(cls, v: str) -> str:
        """Normalize the default extension (no leading dot, no separators).

        Args:
            v: Extension value

        Returns:
            Extension without a leading dot

        Raises:
            InvalidConfigurationError: If the extension is empty or contains a path separator
        """
        v = v.strip().lstrip(".")
        if not v or "/" in v or "\\" in v:
            raise InvalidConfigurationError(f"Invalid default trash extension: {v!r}")
        return v

    @staticmethod
    def find_env_file() -> Path | None:
        """Find the environment file being used.

        Checks for .env.bashhelpers and .env in current directory in that order.

        Returns:
            Path to the env file if found, None otherwise
        """
        for env_file in ENV_FILES:
            path = Path(env_file)
            if path.exists():
                return path.absolute()
        return None
