"""Configuration module for the docmark crawler.

Provides Pydantic-based configuration management with environment variable support
and field validation for crawl, retry, and logging settings.

Example:
    >>> from docmark.core.config import Settings
    >>> settings = Settings(output_dir="/data/docs")
    >>> print(settings.max_depth)
    3
"""

import logging
import os
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_running_in_docker() -> bool:
    """Detect if code is running inside a Docker container.

    Checks for Docker-specific files and environment markers.

    Returns:
        True if running inside Docker container, False otherwise.
    """
    # Check for .dockerenv file (exists in Docker containers)
    if Path("/.dockerenv").exists():
        return True

    # Check cgroup for docker indicators
    try:
        with Path("/proc/1/cgroup").open() as f:
            return "docker" in f.read()
    except (FileNotFoundError, PermissionError):
        pass

    # Check for explicit environment variable
    return os.getenv("RUN_IN_DOCKER", "").lower() in ("true", "1", "yes")


class Settings(BaseSettings):
    """Crawler configuration.

    Environment-aware configuration that automatically points the renderer at
    the Docker network Crawl4AI host inside containers and at localhost on the
    host machine.

    Attributes:
        output_dir: Flat directory receiving one markdown file per crawled URL
        crawl4ai_base_url: Crawl4AI rendering service endpoint
        scope_prefix: Path prefix eligible for recursion (None derives it
            from the seed URL)
        max_depth: Default maximum crawl depth for requests
        task_timeout: Per-page deadline covering render, extraction, and write
        render_timeout: HTTP timeout for a single Crawl4AI request
        launch_attempts: Attempts for renderer session acquisition
        launch_retry_delay: Fixed delay between session acquisition attempts
        load_attempts: Attempts for page navigation
        load_retry_delay: Fixed delay between navigation attempts
        max_concurrency: Children rendered concurrently per parent page
        page_delay: Pacing delay before each page render
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Rotating log file path
        failure_log: Path to the JSONL failure log

    Raises:
        ValidationError: If values are invalid

    Example:
        >>> settings = Settings(output_dir="/data/docs", max_concurrency=4)
        >>> settings.task_timeout
        60.0
    """

    output_dir: Path = Path("uploads")

    # Renderer endpoint (set by model_validator based on environment)
    crawl4ai_base_url: str = ""

    # Crawl behaviour
    scope_prefix: str | None = None
    max_depth: int = 3
    task_timeout: float = 60.0
    render_timeout: float = 30.0
    max_concurrency: int = 1
    page_delay: float = 0.0

    # Retry configuration
    launch_attempts: int = 3
    launch_retry_delay: float = 2.0
    load_attempts: int = 3
    load_retry_delay: float = 2.0

    # Logging
    log_level: str = "INFO"
    log_file: Path = Path(".cache/docmark.log")
    failure_log: Path = Path("failed_pages.jsonl")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOCMARK_",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def set_environment_aware_defaults(self) -> "Settings":
        """Set the renderer URL based on environment if not explicitly configured.

        Returns:
            Settings instance with environment-aware URLs.
        """
        if not self.crawl4ai_base_url:
            self.crawl4ai_base_url = (
                "http://crawl4ai:11235"
                if is_running_in_docker()
                else "http://localhost:52004"
            )
        return self

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls: type["Settings"], v: int) -> int:
        """Validate max_depth is not negative.

        Depth 0 crawls only the seed page.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Maximum depth value

        Returns:
            Validated max_depth

        Raises:
            ValueError: If max_depth is negative
        """
        if v < 0:
            raise ValueError("max_depth must not be negative")
        return v

    @field_validator(
        "task_timeout",
        "render_timeout",
    )
    @classmethod
    def validate_positive_timeout(cls: type["Settings"], v: float) -> float:
        """Validate timeouts are positive.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Timeout in seconds

        Returns:
            Validated timeout

        Raises:
            ValueError: If timeout is not positive
        """
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("launch_attempts", "load_attempts", "max_concurrency")
    @classmethod
    def validate_positive_count(cls: type["Settings"], v: int) -> int:
        """Validate attempt and concurrency counts are positive.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Count value

        Returns:
            Validated count

        Raises:
            ValueError: If count is not positive
        """
        # At least one attempt or worker is needed to make progress
        if v <= 0:
            raise ValueError("attempt and concurrency counts must be positive")
        return v

    @field_validator("launch_retry_delay", "load_retry_delay", "page_delay")
    @classmethod
    def validate_non_negative_delay(cls: type["Settings"], v: float) -> float:
        """Validate delays are not negative.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Delay in seconds

        Returns:
            Validated delay

        Raises:
            ValueError: If delay is negative
        """
        if v < 0:
            raise ValueError("delays must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls: type["Settings"], v: str) -> str:
        """Validate log_level names a standard logging level.

        Args:
            cls: The Settings class (provided by Pydantic)
            v: Level name

        Returns:
            Upper-cased level name

        Raises:
            ValueError: If the level name is unknown
        """
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log_level: {v}")
        return level
