"""
Unified Configuration System for Caption Chat

This module provides a centralized configuration system that consolidates all application settings,
supports environment-based overrides, and provides type-safe configuration access.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import streamlit as st
import os
from pathlib import Path


DEFAULT_ENDPOINT_URL = "https://api-inference.huggingface.co/models/Salesforce/blip-image-captioning-base"


def _optional_float(value: Optional[str]) -> Optional[float]:
    """Parse an optional float from an environment string"""
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass
class APIConfig:
    """API configuration settings"""
    hf_api_key: str = ""

    @classmethod
    def from_secrets(cls) -> 'APIConfig':
        """Load API config from Streamlit secrets"""
        # In test environment, prefer environment variables
        if os.getenv("PYTEST_CURRENT_TEST") is not None:
            return cls(hf_api_key=os.getenv("HF_API_KEY", ""))

        try:
            return cls(hf_api_key=st.secrets.get("HF_API_KEY", ""))
        except Exception:
            # Fallback to environment variables if secrets not available
            return cls(hf_api_key=os.getenv("HF_API_KEY", ""))


@dataclass
class CaptioningConfig:
    """Captioning endpoint configuration"""
    endpoint_url: str = field(
        default_factory=lambda: os.getenv("CAPTION_ENDPOINT_URL", DEFAULT_ENDPOINT_URL)
    )
    default_prompt: str = "Describe this image"
    text_only_reply: str = "Text-only input detected. Try uploading an image!"
    no_response_reply: str = "No response from model."
    # None leaves the timeout to the transport
    timeout_seconds: Optional[float] = field(
        default_factory=lambda: _optional_float(os.getenv("CAPTION_TIMEOUT_SECONDS"))
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging"""
        return {
            "endpoint_url": self.endpoint_url,
            "default_prompt": self.default_prompt,
            "timeout_seconds": self.timeout_seconds,
        }


@dataclass
class UIConfig:
    """User interface configuration"""
    app_title: str = "Caption Chat"
    page_icon: str = "🖼️"
    input_placeholder: str = "Type a message"
    send_label: str = "Send"
    accepted_file_types: List[str] = field(default_factory=lambda: [
        "png", "jpg", "jpeg", "gif", "bmp", "webp"
    ])
    image_max_width: int = 200
    message_list_height: int = 300
    empty_state_caption: str = "Upload an image and ask a question about it."


@dataclass
class LoggingConfig:
    """Logging and monitoring configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    enable_file_logging: bool = True
    log_file: str = "logs/app.log"


@dataclass
class AppConfig:
    """Main application configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    captioning: CaptioningConfig = field(default_factory=CaptioningConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Environment settings
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    @classmethod
    def load(cls) -> 'AppConfig':
        """Load configuration with environment overrides"""
        config = cls()

        # Load API configuration from secrets/environment
        config.api = APIConfig.from_secrets()

        # Apply environment-specific overrides
        if config.environment == "production":
            config.debug = False
            config.logging.level = "WARNING"
        elif config.environment == "development":
            config.debug = True
            config.logging.level = "DEBUG"

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        # Check required API keys
        if not self.api.hf_api_key:
            errors.append("Hugging Face API key is required")

        if not self.captioning.endpoint_url:
            errors.append("Captioning endpoint URL is required")

        if self.captioning.timeout_seconds is not None and self.captioning.timeout_seconds <= 0:
            errors.append("Captioning timeout must be positive")

        if self.logging.enable_file_logging:
            log_dir = Path(self.logging.log_file).parent
            if not log_dir.exists():
                log_dir.mkdir(parents=True, exist_ok=True)

        return errors


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance"""
    global _config
    if _config is None:
        _config = AppConfig.load()

        # Validate configuration
        errors = _config.validate()
        if errors:
            import warnings
            for error in errors:
                warnings.warn(f"Configuration error: {error}")

    return _config


def reload_config() -> AppConfig:
    """Reload configuration (useful for testing)"""
    global _config
    _config = None
    return get_config()


def get_hf_api_key() -> str:
    """Get the Hugging Face API token"""
    return get_config().api.hf_api_key
