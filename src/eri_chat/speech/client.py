"""Speech-to-text client for the Groq audio transcription endpoint."""

import httpx

from eri_chat.core.exceptions import TranscriptionFailed
from eri_chat.utils.logging import get_logger


logger = get_logger(__name__)


class TranscriptionClient:
    """Transcribes recorded audio into text."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str = "whisper-large-v3",
    ):
        """
        Initialize the transcription client.

        Args:
            client: Shared HTTP client whose base_url is the Groq API root
            api_key: Groq API key
            model: Transcription model id
        """
        self._client = client
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._model = model

    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.webm",
        content_type: str | None = None,
        lang: str = "ja",
    ) -> str:
        """
        Transcribe one audio clip.

        Args:
            audio: Raw audio bytes
            filename: Original file name; the provider infers the format from it
            content_type: MIME type of the upload
            lang: "ja" or "en"; anything else is treated as English

        Returns:
            Transcribed text

        Raises:
            TranscriptionFailed: The provider rejected the request or was unreachable
        """
        language = "ja" if lang == "ja" else "en"
        logger.debug(
            "Transcribing audio",
            model=self._model,
            language=language,
            size=len(audio),
        )

        try:
            response = await self._client.post(
                "/audio/transcriptions",
                headers=self._headers,
                data={
                    "model": self._model,
                    "language": language,
                    "response_format": "json",
                },
                files={"file": (filename, audio, content_type or "application/octet-stream")},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TranscriptionFailed(
                f"Transcription rejected with status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise TranscriptionFailed(f"Transcription request failed: {e}") from e

        text = payload.get("text") if isinstance(payload, dict) else None
        if not isinstance(text, str):
            raise TranscriptionFailed("Transcription response has no text")

        logger.info("Audio transcribed", model=self._model, chars=len(text))
        return text
