"""
Configuration for the subtitle extraction pipeline.

Loads settings from environment variables with sensible defaults and
range clamping. Bad values are logged and replaced by the default.
"""

import os
from dataclasses import dataclass
from typing import Optional

from logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_TOOL_URL = "https://www.feiyudo.com/caption/subtitle/bilibili"
DEFAULT_RESPONSE_MARKER = "subtitleExtract"

# Tool page selectors
INPUT_SELECTOR = "input[placeholder*='请将链接粘贴到这里']"
SUBMIT_BUTTON_SELECTOR = "button.el-button--primary:has-text('提取')"


@dataclass
class ExtractionConfig:
    """Timeouts, endpoints and browser options for one extraction."""

    tool_url: str = DEFAULT_TOOL_URL
    response_marker: str = DEFAULT_RESPONSE_MARKER

    # Timeout settings (seconds)
    navigation_timeout: int = 30
    input_wait_timeout: int = 10
    response_wait_timeout: int = 30

    poll_interval_ms: int = 500
    headless: bool = True

    @classmethod
    def from_env(cls) -> 'ExtractionConfig':
        """Load configuration from environment variables with validation."""
        config = cls(
            tool_url=os.getenv("SUBTITLE_TOOL_URL", DEFAULT_TOOL_URL).strip() or DEFAULT_TOOL_URL,
            response_marker=os.getenv("SUBTITLE_RESPONSE_MARKER", DEFAULT_RESPONSE_MARKER).strip() or DEFAULT_RESPONSE_MARKER,
            navigation_timeout=cls._parse_int_env("SUBTITLE_NAVIGATION_TIMEOUT", 30, min_val=5, max_val=180),
            input_wait_timeout=cls._parse_int_env("SUBTITLE_INPUT_TIMEOUT", 10, min_val=1, max_val=60),
            response_wait_timeout=cls._parse_int_env("SUBTITLE_RESPONSE_TIMEOUT", 30, min_val=1, max_val=300),
            poll_interval_ms=cls._parse_int_env("SUBTITLE_POLL_INTERVAL_MS", 500, min_val=50, max_val=5000),
            headless=cls._parse_bool_env("SUBTITLE_HEADLESS", True),
        )
        config._validate_config()
        return config

    @staticmethod
    def _parse_bool_env(env_var: str, default: bool) -> bool:
        value = os.getenv(env_var, str(default).lower())
        return value.strip().lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _parse_int_env(env_var: str, default: int, min_val: Optional[int] = None, max_val: Optional[int] = None) -> int:
        """Parse integer environment variable, clamped to [min_val, max_val]."""
        raw = os.getenv(env_var)
        if raw is None:
            return default

        try:
            value = int(raw)
        except (ValueError, TypeError):
            logger.error(f"Invalid value for {env_var}: {raw!r}, using default {default}")
            return default

        if min_val is not None and value < min_val:
            logger.warning(f"{env_var}={value} is below minimum {min_val}, using {min_val}")
            return min_val
        if max_val is not None and value > max_val:
            logger.warning(f"{env_var}={value} is above maximum {max_val}, using {max_val}")
            return max_val
        return value

    def _validate_config(self) -> None:
        """Log warnings for problematic combinations."""
        if self.poll_interval_ms > self.response_wait_timeout * 1000:
            logger.warning(
                f"Configuration warning: poll interval ({self.poll_interval_ms}ms) exceeds "
                f"response wait ({self.response_wait_timeout}s)"
            )

    @property
    def navigation_timeout_ms(self) -> int:
        return self.navigation_timeout * 1000

    @property
    def input_wait_timeout_ms(self) -> int:
        return self.input_wait_timeout * 1000


_extraction_config: Optional[ExtractionConfig] = None


def get_extraction_config() -> ExtractionConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _extraction_config
    if _extraction_config is None:
        _extraction_config = ExtractionConfig.from_env()
    return _extraction_config


def reload_extraction_config() -> ExtractionConfig:
    """Reload configuration from environment variables."""
    global _extraction_config
    _extraction_config = ExtractionConfig.from_env()
    return _extraction_config
