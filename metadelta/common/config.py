"""Configuration for a delta resolution run."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from metadelta.common.errors import ConfigurationError
from metadelta.git.domain.value_objects import DiffRange

ENV_PREFIX = "METADELTA_"
TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class DeltaConfig:
    """Everything a resolution run needs to know."""

    repo_path: Path
    from_revision: str
    to_revision: str = "HEAD"
    source: str = ""
    ignore_whitespace: bool = False
    ignore: Path | None = None
    ignore_destructive: Path | None = None
    include: Path | None = None
    include_destructive: Path | None = None
    generate_delta: bool = True
    max_workers: int = 4

    def __post_init__(self) -> None:
        if not self.from_revision:
            raise ConfigurationError("A starting revision is required")
        if not self.to_revision:
            raise ConfigurationError("A target revision is required")
        if self.max_workers < 1:
            raise ConfigurationError("max_workers must be at least 1")

    def diff_range(self) -> DiffRange:
        return DiffRange(
            repo_path=self.repo_path,
            from_revision=self.from_revision,
            to_revision=self.to_revision,
            ignore_whitespace=self.ignore_whitespace,
            source=self.source,
        )

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "DeltaConfig":
        """
        Build a configuration from ``METADELTA_*`` environment variables.

        Variables are read after loading ``env_file`` (or the ``.env`` that
        ``load_dotenv`` finds by default); values already in the environment win.

        Args:
            env_file: Optional .env file to load first

        Returns:
            DeltaConfig

        Raises:
            ConfigurationError: If METADELTA_FROM is not set or a value is invalid
        """
        _load_env_file(env_file)

        from_revision = _env("FROM")
        if not from_revision:
            raise ConfigurationError(
                f"{ENV_PREFIX}FROM environment variable is required. "
                "Please set it in a .env file or as an environment variable."
            )
        max_workers = _env("MAX_WORKERS") or "4"
        if not max_workers.isdigit():
            raise ConfigurationError(f"{ENV_PREFIX}MAX_WORKERS must be an integer: {max_workers}")

        return cls(
            repo_path=Path(_env("REPO") or "."),
            from_revision=from_revision,
            to_revision=_env("TO") or "HEAD",
            source=_env("SOURCE") or "",
            ignore_whitespace=_flag("IGNORE_WHITESPACE", default=False),
            ignore=_path("IGNORE"),
            ignore_destructive=_path("IGNORE_DESTRUCTIVE"),
            include=_path("INCLUDE"),
            include_destructive=_path("INCLUDE_DESTRUCTIVE"),
            generate_delta=_flag("GENERATE_DELTA", default=True),
            max_workers=int(max_workers),
        )


def _load_env_file(env_file: Path | None) -> None:
    """Load environment variables from a .env file."""
    if env_file is not None:
        if env_file.exists():
            load_dotenv(env_file)
        return
    load_dotenv()


def _env(name: str) -> str | None:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    return value.strip() if value else None


def _flag(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.lower() in TRUE_VALUES


def _path(name: str) -> Path | None:
    value = _env(name)
    return Path(value) if value else None
