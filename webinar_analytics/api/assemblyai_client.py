"""AssemblyAI REST client for batch transcription and streaming tokens"""

import time
import logging
from typing import Any, Dict, Optional

import requests
from pydantic import BaseModel, Field
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import config
from ..errors import TranscriptionError

logger = logging.getLogger(__name__)

STREAMING_BASE_URL = "https://streaming.assemblyai.com"
REQUEST_TIMEOUT_SECONDS = 30


class TranscriptionConfig(BaseModel):
    """Feature flags sent with a transcription request"""

    auto_highlights: bool = Field(True, description="Extract key phrases")
    sentiment_analysis: bool = Field(True, description="Per-sentence sentiment labels")
    speaker_labels: bool = Field(True, description="Speaker diarization")
    punctuate: bool = Field(True, description="Add punctuation")
    format_text: bool = Field(True, description="Casing and number formatting")
    language_code: Optional[str] = Field(None, description="Language code (e.g., 'en')")


class AssemblyAIClient:
    """Submit audio to AssemblyAI and wait for the finished transcript"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        poll_interval: Optional[float] = None,
        timeout: Optional[int] = None,
    ):
        """Initialize the client

        Args:
            api_key: AssemblyAI API key (default: ASSEMBLYAI_API_KEY)
            base_url: API base URL (default: ASSEMBLYAI_BASE_URL)
            poll_interval: Seconds between status polls
            timeout: Maximum seconds to wait for a transcript to finish
        """
        self.api_key = api_key
        self.base_url = (base_url or config.assemblyai_base_url).rstrip("/")
        self.poll_interval = poll_interval or config.transcription_poll_interval_seconds
        self.timeout = timeout or config.transcription_timeout_seconds
        self.session = None

    def _get_session(self) -> requests.Session:
        """Get or create an authenticated HTTP session"""
        if self.session is None:
            api_key = self.api_key or config.require_assemblyai_key()
            self.session = requests.Session()
            self.session.headers.update({"authorization": api_key})
        return self.session

    @retry(
        stop=stop_after_attempt(config.retry_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(requests.ConnectionError),
        reraise=True,
    )
    def submit(self, audio_url: str, transcription_config: Optional[TranscriptionConfig] = None) -> str:
        """Queue an audio URL for transcription and return the vendor transcript ID"""
        payload = {"audio_url": audio_url}
        payload.update((transcription_config or TranscriptionConfig()).model_dump(exclude_none=True))

        response = self._get_session().post(
            f"{self.base_url}/v2/transcript", json=payload, timeout=REQUEST_TIMEOUT_SECONDS
        )
        if response.status_code >= 400:
            raise TranscriptionError(
                f"AssemblyAI rejected transcription request ({response.status_code}): {response.text[:200]}"
            )

        transcript_id = response.json()["id"]
        logger.info(f"Submitted transcription {transcript_id} for {audio_url}")
        return transcript_id

    def get_transcript(self, transcript_id: str) -> Dict[str, Any]:
        """Fetch the current state of a transcript"""
        response = self._get_session().get(
            f"{self.base_url}/v2/transcript/{transcript_id}", timeout=REQUEST_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        return response.json()

    def wait_for_completion(self, transcript_id: str) -> Dict[str, Any]:
        """Poll until the transcript is completed or errored

        Returns:
            Final transcript JSON (status 'completed' or 'error')

        Raises:
            TranscriptionError: If the transcript does not finish within the timeout
        """
        deadline = time.monotonic() + self.timeout

        while True:
            result = self.get_transcript(transcript_id)
            status = result.get("status")

            if status in ("completed", "error"):
                logger.info(f"Transcription {transcript_id} finished with status {status}")
                return result

            if time.monotonic() >= deadline:
                raise TranscriptionError(
                    f"Transcription {transcript_id} did not finish within {self.timeout}s (last status: {status})"
                )

            logger.debug(f"Transcription {transcript_id} is {status}, waiting {self.poll_interval}s")
            time.sleep(self.poll_interval)

    def transcribe(
        self, audio_url: str, transcription_config: Optional[TranscriptionConfig] = None
    ) -> Dict[str, Any]:
        """Submit an audio URL and block until the vendor finishes

        Args:
            audio_url: Publicly reachable recording URL
            transcription_config: Feature flags (defaults: everything on)

        Returns:
            Final transcript JSON; check result['status'] for 'completed'
        """
        transcript_id = self.submit(audio_url, transcription_config)
        return self.wait_for_completion(transcript_id)

    def create_streaming_token(self, expires_in_seconds: Optional[int] = None) -> str:
        """Create a short-lived token a browser can use for live streaming"""
        expires_in = expires_in_seconds or config.streaming_token_ttl_seconds
        response = self._get_session().get(
            f"{STREAMING_BASE_URL}/v3/token",
            params={"expires_in_seconds": expires_in},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        if response.status_code >= 400:
            raise TranscriptionError(
                f"AssemblyAI rejected token request ({response.status_code}): {response.text[:200]}"
            )
        return response.json()["token"]
