"""API client for the AssemblyAI transcription service"""

from .assemblyai_client import AssemblyAIClient, TranscriptionConfig

__all__ = ["AssemblyAIClient", "TranscriptionConfig"]
