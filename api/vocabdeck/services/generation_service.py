"""
Generation service for card images and explanations using Google Gemini.

HTTP calls are blocking (requests) and run in a worker thread, so several
generations can be awaited concurrently. Every failure is raised as
GenerationError; retrying is left to the caller.
"""
import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests
from fastapi.concurrency import run_in_threadpool

from vocabdeck.core.config import settings
from vocabdeck.core.exceptions import GenerationError, ValidationError
from vocabdeck.services.image_service import process_image_bytes

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True)
class ExplanationResult:
    """Outcome of generating one card's explanation in a batch."""
    card_id: str
    explanation: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_image_prompt(word: str, meaning: str) -> str:
    """
    Build the image generation prompt for a word.

    Args:
        word: The vocabulary word
        meaning: Its meaning, used to disambiguate the picture

    Returns:
        The formatted prompt string
    """
    prompt = (
        f'A vibrant, high-quality, photorealistic image representing the word: "{word}" '
        f'(which means "{meaning}"). Centered object, clean background, focus on the concept.\n\n'
    )
    prompt += "IMPORTANT: The image must contain NO TEXT, NO WORDS, NO LETTERS and NO WRITTEN SYMBOLS of any kind.\n"
    return prompt


def build_explanation_prompt(word: str, meaning: str, hint: Optional[str] = None, language: Optional[str] = None) -> str:
    """Build the prompt asking for a short, memorable explanation of a word."""
    language = language or settings.explanation_language
    prompt = (
        f'You are a helpful language-learning assistant. For the word "{word}" (which means "{meaning}"), '
        f"give a concise, easy-to-understand explanation in {language} that helps the learner remember it. "
        f"It can be a simple definition, an example sentence or a memorable analogy. "
        f"Keep it under 50 words and return only the explanation text."
    )
    if hint and hint.strip():
        prompt += f"\n\nUse the following hint when writing the explanation: {hint.strip()}"
    return prompt


class GenerationService:
    """Client for the Gemini text and image generation endpoints."""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.google_gemini_api_key
        self.text_model = settings.gemini_text_model
        self.image_model = settings.gemini_image_model
        self.timeout = settings.generation_timeout_seconds

        if not self.api_key:
            logger.warning("Google Gemini API key not configured. Generation will fail until one is set.")

    @property
    def is_ready(self) -> bool:
        return bool(self.api_key)

    def configure(self, api_key: str) -> None:
        """Replace the API key used for subsequent calls."""
        self.api_key = api_key.strip()
        logger.info(f"Gemini API key {'set' if self.api_key else 'cleared'}")

    # Async API

    async def generate_image(self, word: str, meaning: str) -> str:
        """
        Generate a square JPEG picture for a word.

        Returns:
            JPEG data URL

        Raises:
            GenerationError: If the API call fails or returns no usable image
        """
        return await run_in_threadpool(self._generate_image_sync, word, meaning)

    async def generate_explanation(self, word: str, meaning: str, hint: Optional[str] = None) -> str:
        """
        Generate a short explanation for a word.

        Raises:
            GenerationError: If the API call fails or returns no text
        """
        return await run_in_threadpool(self._generate_explanation_sync, word, meaning, hint)

    async def generate_explanations(
        self,
        items: Sequence[Tuple[str, str, str]],
        hint: Optional[str] = None
    ) -> List[ExplanationResult]:
        """
        Generate explanations for several cards concurrently.

        Each card succeeds or fails on its own; a failure never discards the
        other results.

        Args:
            items: (card_id, word, meaning) triples
            hint: Optional hint applied to every prompt

        Returns:
            One ExplanationResult per item, in input order
        """
        if not items:
            return []

        logger.info(f"Generating explanations for {len(items)} card(s)")
        tasks = [self.generate_explanation(word, meaning, hint) for _, word, meaning in items]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results = []
        for (card_id, _, _), outcome in zip(items, outcomes):
            if isinstance(outcome, GenerationError):
                results.append(ExplanationResult(card_id=card_id, error=outcome.reason))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(ExplanationResult(card_id=card_id, explanation=outcome))

        failed = sum(1 for r in results if not r.ok)
        logger.info(f"Explanation generation summary: successful: {len(results) - failed}, failed: {failed}")
        return results

    # Blocking implementation

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise GenerationError("Google Gemini API key not configured. Set GOOGLE_GEMINI_API_KEY or configure one at runtime.")
        return self.api_key

    def _post(self, url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """POST to a Gemini endpoint and return the decoded JSON body."""
        api_key = self._require_api_key()
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)

        try:
            response = requests.post(
                f"{url}?key={api_key}",
                json=payload,
                headers=request_headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Gemini API request failed: {str(e)}")
            raise GenerationError(f"Gemini API request failed: {str(e)}")

        if not response.ok:
            try:
                error_info = response.json().get("error", {})
                error_msg = error_info.get("message") if isinstance(error_info, dict) else str(error_info)
            except ValueError:
                error_msg = None
            error_msg = error_msg or response.text[:200]
            logger.error(f"Gemini API HTTP error {response.status_code}: {error_msg}")
            raise GenerationError(f"Gemini API error (HTTP {response.status_code}): {error_msg}")

        try:
            return response.json()
        except ValueError:
            raise GenerationError(f"Gemini API returned a non-JSON response: {response.text[:200]}")

    def _generate_explanation_sync(self, word: str, meaning: str, hint: Optional[str] = None) -> str:
        payload = {
            "contents": [{
                "parts": [{
                    "text": build_explanation_prompt(word, meaning, hint)
                }]
            }],
            "generationConfig": {
                "temperature": 0.7,
                "maxOutputTokens": 1024,  # Thinking tokens count against this budget
            }
        }
        logger.info(f"Generating explanation for '{word}' with {self.text_model}")
        data = self._post(f"{GEMINI_BASE_URL}/models/{self.text_model}:generateContent", payload)

        candidates = data.get("candidates") or []
        if not candidates:
            raise GenerationError(f"No explanation was generated: {data.get('promptFeedback', data)}")

        candidate = candidates[0]
        parts = candidate.get("content", {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        if not text:
            finish_reason = candidate.get("finishReason", "UNKNOWN")
            raise GenerationError(f"Explanation generation returned no text (finish reason: {finish_reason})")

        if candidate.get("finishReason") == "MAX_TOKENS":
            logger.warning(f"Explanation for '{word}' was truncated (MAX_TOKENS), returning partial text")
        return text

    def _generate_image_sync(self, word: str, meaning: str) -> str:
        payload = {
            "model": self.image_model,
            "prompt": build_image_prompt(word, meaning),
            "n": 1,
            "response_format": "b64_json",
            "size": "1024x1024"  # Resized to settings.image_size afterwards
        }
        # The OpenAI-compatible endpoint also wants a bearer token
        headers = {"Authorization": f"Bearer {self._require_api_key()}"}
        logger.info(f"Generating image for '{word}' with {self.image_model}")
        data = self._post(f"{GEMINI_BASE_URL}/openai/images/generations", payload, headers=headers)

        images = data.get("data") or []
        if not images or "b64_json" not in images[0]:
            logger.error(f"No image data in Gemini response. Response keys: {list(data.keys())}")
            raise GenerationError("No image was generated.")

        try:
            image_bytes = base64.b64decode(images[0]["b64_json"])
            return process_image_bytes(image_bytes)
        except (ValueError, ValidationError) as e:
            raise GenerationError(f"Generated image could not be processed: {str(e)}")
