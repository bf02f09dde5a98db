"""Configuration management"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Application configuration"""

    def __init__(self):
        # Transcription vendor
        # The key is only required once a transcription or streaming token is requested
        self.assemblyai_api_key = os.getenv("ASSEMBLYAI_API_KEY", "")
        self.assemblyai_base_url = os.getenv(
            "ASSEMBLYAI_BASE_URL", "https://api.assemblyai.com"
        ).rstrip("/")
        self.transcription_poll_interval_seconds = float(
            os.getenv("TRANSCRIPTION_POLL_INTERVAL_SECONDS", "3")
        )
        self.transcription_timeout_seconds = int(
            os.getenv("TRANSCRIPTION_TIMEOUT_SECONDS", "1800")
        )
        self.streaming_token_ttl_seconds = int(
            os.getenv("STREAMING_TOKEN_TTL_SECONDS", "300")
        )
        self.default_language = os.getenv("DEFAULT_LANGUAGE", "en")

        # API Retry Configuration
        self.retry_attempts = int(os.getenv("RETRY_ATTEMPTS", "3"))

        # Analytics Configuration
        self.timeline_interval_seconds = int(os.getenv("TIMELINE_INTERVAL_SECONDS", "300"))
        self.live_transcription_limit = int(os.getenv("LIVE_TRANSCRIPTION_LIMIT", "100"))

        # Server / Logging
        self.port = int(os.getenv("PORT", "8080"))
        self.debug = self._parse_bool(os.getenv("DEBUG", "false"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    def _parse_bool(self, value: str) -> bool:
        """Parse boolean from string"""
        return value.lower() in ("true", "1", "yes", "on")

    def validate(self) -> None:
        """Validate configuration"""
        if self.timeline_interval_seconds < 1:
            raise ValueError("TIMELINE_INTERVAL_SECONDS must be at least 1")

        if self.live_transcription_limit < 1:
            raise ValueError("LIVE_TRANSCRIPTION_LIMIT must be at least 1")

        if self.retry_attempts < 1:
            raise ValueError("RETRY_ATTEMPTS must be at least 1")

        if self.transcription_poll_interval_seconds <= 0:
            raise ValueError("TRANSCRIPTION_POLL_INTERVAL_SECONDS must be positive")

    def require_assemblyai_key(self) -> str:
        """Return the AssemblyAI API key or raise if it is not configured"""
        if not self.assemblyai_api_key:
            raise ValueError(
                "ASSEMBLYAI_API_KEY not found in environment variables. "
                "Please set it in your .env file or environment."
            )
        return self.assemblyai_api_key


# Global configuration instance
config = Config()
