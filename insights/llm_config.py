# llm_config.py - Text-generation backends for insights
# Provider configs, HTTP clients, provider selection, async adapter
"""
llm_config.py - LLM Configuration & Factory

Supports:
1. Anthropic Messages API - used when ANTHROPIC_API_KEY is set
2. Groq API (OpenAI-compatible) - used when GROQ_API_KEY is set
3. Ollama (local) - fallback when a server answers on OLLAMA_BASE_URL

With no provider available the engine runs in statistics-only mode.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import urllib.error
import urllib.request
from dataclasses import dataclass, field

from insights.prompts import Completion, InsightRequest

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_GROQ_MODEL = "llama-3.1-8b-instant"
DEFAULT_OLLAMA_MODEL = "llama3.2"

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"
GROQ_API_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"

DEFAULT_TEMPERATURE = 0.5
DEFAULT_MAX_TOKENS = 1000
REQUEST_TIMEOUT = 60  # seconds
AVAILABILITY_TIMEOUT = 3  # seconds


def _env_timeout() -> int:
    raw = os.environ.get("INSIGHT_TIMEOUT", "")
    try:
        return int(raw) if raw else REQUEST_TIMEOUT
    except ValueError:
        logger.warning("Ignoring non-integer INSIGHT_TIMEOUT=%r", raw)
        return REQUEST_TIMEOUT


# =============================================================================
# EXCEPTIONS
# =============================================================================

class InsightServiceError(Exception):
    """Base exception for text-generation failures."""
    pass


class LLMConnectionError(InsightServiceError):
    """Raised when the provider cannot be reached."""
    pass


class LLMResponseError(InsightServiceError):
    """Raised when the provider answers with an error or an unreadable body."""
    pass


# =============================================================================
# PROVIDER CONFIGS
# =============================================================================

@dataclass
class AnthropicConfig:
    model: str = field(default_factory=lambda: os.environ.get("INSIGHT_MODEL", DEFAULT_ANTHROPIC_MODEL))
    api_key: str = field(default_factory=lambda: os.environ.get("ANTHROPIC_API_KEY", ""))
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: int = field(default_factory=_env_timeout)


@dataclass
class GroqConfig:
    model: str = field(default_factory=lambda: os.environ.get("INSIGHT_MODEL", DEFAULT_GROQ_MODEL))
    api_key: str = field(default_factory=lambda: os.environ.get("GROQ_API_KEY", ""))
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: int = field(default_factory=_env_timeout)


@dataclass
class OllamaConfig:
    model: str = field(default_factory=lambda: os.environ.get("INSIGHT_MODEL", DEFAULT_OLLAMA_MODEL))
    base_url: str = field(default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", DEFAULT_OLLAMA_BASE_URL))
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: int = field(default_factory=_env_timeout)


# =============================================================================
# HTTP CLIENTS
# =============================================================================

def _post_json(url: str, payload: dict, headers: dict[str, str], timeout: int) -> dict:
    """
    POST a JSON body and decode the JSON answer.

    Raises:
        LLMConnectionError: If the server is unreachable
        LLMResponseError: On HTTP errors or a non-JSON body
    """
    request = urllib.request.Request(
        url,
        data=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json", **headers},
        method="POST",
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return json.loads(response.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", errors="replace") if e.fp else str(e)
        raise LLMResponseError(f"HTTP {e.code} from {url}: {body[:200]}") from e
    except urllib.error.URLError as e:
        raise LLMConnectionError(f"Cannot connect to {url}: {e.reason}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LLMResponseError(f"Invalid response from {url}: {e}") from e
    except TimeoutError as e:
        raise LLMConnectionError(f"Request to {url} timed out after {timeout}s") from e


class AnthropicLLM:
    """Client for the Anthropic Messages API."""

    provider = "anthropic"

    def __init__(self, config: AnthropicConfig | None = None):
        self.config = config or AnthropicConfig()

    @property
    def model(self) -> str:
        return self.config.model

    def is_available(self) -> bool:
        return bool(self.config.api_key)

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        if not self.config.api_key:
            raise InsightServiceError("Anthropic API key not configured")

        payload = {
            "model": self.config.model,
            "max_tokens": max_tokens or self.config.max_tokens,
            "temperature": self.config.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            payload["system"] = system_prompt

        result = _post_json(
            ANTHROPIC_API_URL,
            payload,
            headers={
                "x-api-key": self.config.api_key,
                "anthropic-version": ANTHROPIC_API_VERSION,
            },
            timeout=self.config.timeout,
        )
        try:
            blocks = result["content"]
            return "".join(b.get("text", "") for b in blocks if b.get("type") == "text").strip()
        except (KeyError, TypeError, AttributeError) as e:
            raise LLMResponseError(f"Unexpected Anthropic response shape: {e}") from e


class GroqLLM:
    """
    Groq API client for text generation.

    Uses the OpenAI-compatible chat completions format.
    """

    provider = "groq"

    def __init__(self, config: GroqConfig | None = None):
        self.config = config or GroqConfig()

    @property
    def model(self) -> str:
        return self.config.model

    def is_available(self) -> bool:
        return bool(self.config.api_key)

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        if not self.config.api_key:
            raise InsightServiceError("Groq API key not configured")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        result = _post_json(
            f"{GROQ_API_BASE_URL}/chat/completions",
            {
                "model": self.config.model,
                "messages": messages,
                "temperature": self.config.temperature,
                "max_tokens": max_tokens or self.config.max_tokens,
            },
            headers={"Authorization": f"Bearer {self.config.api_key}"},
            timeout=self.config.timeout,
        )
        try:
            return result["choices"][0]["message"]["content"].strip()
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise LLMResponseError(f"Unexpected Groq response shape: {e}") from e


class OllamaLLM:
    """Client for a local Ollama server (non-streaming generate endpoint)."""

    provider = "ollama"

    def __init__(self, config: OllamaConfig | None = None):
        self.config = config or OllamaConfig()

    @property
    def model(self) -> str:
        return self.config.model

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    def is_available(self) -> bool:
        """Check if the Ollama server answers on /api/tags."""
        try:
            request = urllib.request.Request(f"{self.base_url}/api/tags", method="GET")
            with urllib.request.urlopen(request, timeout=AVAILABILITY_TIMEOUT) as response:
                return response.status == 200
        except (urllib.error.URLError, OSError):
            return False

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        payload = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "num_predict": max_tokens or self.config.max_tokens,
            },
        }
        if system_prompt:
            payload["system"] = system_prompt

        result = _post_json(
            f"{self.base_url}/api/generate",
            payload,
            headers={},
            timeout=self.config.timeout,
        )
        text = result.get("response") if isinstance(result, dict) else None
        if not isinstance(text, str):
            raise LLMResponseError("Ollama response has no 'response' text")
        return text.strip()


TextLLM = AnthropicLLM | GroqLLM | OllamaLLM


# =============================================================================
# FACTORY
# =============================================================================

def get_llm(prefer_cloud: bool = True) -> TextLLM | None:
    """
    Pick the first available text-generation backend.

    Priority order (prefer_cloud=True): Anthropic, Groq, Ollama. With
    prefer_cloud=False, Ollama is tried first.

    Returns:
        Configured client, or None for statistics-only mode
    """
    cloud: list[TextLLM] = [AnthropicLLM(), GroqLLM()]
    local: list[TextLLM] = [OllamaLLM()]
    candidates = cloud + local if prefer_cloud else local + cloud

    for llm in candidates:
        if llm.is_available():
            logger.info("Using %s (%s) for insights", llm.provider, llm.model)
            return llm

    logger.info("No insight backend available; statistics-only mode")
    return None


def get_llm_status() -> dict:
    """Availability of each backend, for display."""
    anthropic = AnthropicLLM().is_available()
    groq = GroqLLM().is_available()
    ollama = OllamaLLM().is_available()

    active = None
    for name, available in (("anthropic", anthropic), ("groq", groq), ("ollama", ollama)):
        if available:
            active = name
            break

    return {
        "anthropic_available": anthropic,
        "groq_available": groq,
        "ollama_available": ollama,
        "active_provider": active,
    }


def as_completion(llm: TextLLM) -> Completion:
    """
    Adapt a blocking client into the async completion capability.

    The HTTP call runs in a worker thread so the event loop stays free.
    """

    async def complete(request: InsightRequest) -> str:
        return await asyncio.to_thread(
            llm.generate,
            request.prompt,
            request.system_prompt,
            request.max_tokens,
        )

    return complete


def default_completion(prefer_cloud: bool = True) -> Completion | None:
    """Completion capability for the first available backend, or None."""
    llm = get_llm(prefer_cloud=prefer_cloud)
    return as_completion(llm) if llm is not None else None
