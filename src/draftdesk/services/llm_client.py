"""Streaming chat client that turns model output into NDJSON chunk models."""

import asyncio
import json
from typing import Any, AsyncIterator, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from draftdesk.models.config import LLMConfig
from draftdesk.utils.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

# Transient transport failures worth another attempt
RETRYABLE_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout)


def openai_delta_text(data: Any) -> Optional[str]:
    """Text of an OpenAI streaming chunk: {"choices": [{"delta": {"content": ...}}]}."""
    try:
        return data["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return None


def ollama_message_text(data: Any) -> Optional[str]:
    """Text of an Ollama /api/chat chunk: {"message": {"content": ...}, "done": ...}."""
    try:
        return data["message"]["content"]
    except (KeyError, TypeError):
        return None


def server_root(endpoint: str) -> str:
    """Endpoint without trailing slash and without an OpenAI-style /v1 suffix."""
    root = endpoint.rstrip("/")
    return root[:-3] if root.endswith("/v1") else root


class LLMClient:
    """
    Chat completion client for OpenAI-compatible endpoints and Ollama.

    The model is prompted to answer in NDJSON. Whatever framing the server
    wraps tokens in (plain lines, SSE, OpenAI deltas, Ollama messages), the
    client reassembles the model's text and parses each complete line into a
    pydantic chunk model.
    """

    def __init__(self, config: LLMConfig):
        self.config = config
        self.timeout = httpx.Timeout(connect=10.0, read=60.0, write=10.0, pool=10.0)
        self._is_ollama: Optional[bool] = None

    async def _detect_ollama(self) -> bool:
        """Probe /api/version once; anything but a 200 means OpenAI-compatible."""
        if self._is_ollama is not None:
            return self._is_ollama

        version_url = f"{server_root(str(self.config.endpoint))}/api/version"
        is_ollama = False
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(5.0)) as client:
                response = await client.get(version_url)
                is_ollama = response.status_code == 200
        except httpx.HTTPError as e:
            logger.debug("llm_provider_probe_failed", version_url=version_url, error=str(e))

        self._is_ollama = is_ollama
        logger.info("llm_provider_detected", provider="ollama" if is_ollama else "openai")
        return is_ollama

    def _build_request(
        self, prompt: str, system_prompt: str, temperature: float, is_ollama: bool
    ) -> tuple[str, dict[str, Any]]:
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "stream": True,
            "temperature": temperature,
        }
        if is_ollama:
            payload["options"] = {"num_ctx": self.config.num_ctx}
            return server_root(str(self.config.endpoint)) + "/api/chat", payload
        return str(self.config.endpoint).rstrip("/") + "/chat/completions", payload

    async def _output_lines(self, response: httpx.Response, is_ollama: bool, request_id: str) -> AsyncIterator[str]:
        """Yield complete lines of the model's own output, with transport framing removed."""
        content_type = str(response.headers.get("content-type", ""))
        wrapped = is_ollama or "text/event-stream" in content_type
        pending = ""

        async for raw in response.aiter_lines():
            line = raw.strip()
            if line.startswith("data:"):
                line = line[5:].strip()
            if not line or line == "[DONE]":
                continue

            if not wrapped:
                yield line
                continue

            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                logger.error("llm_malformed_frame", request_id=request_id, line=raw, error=str(e))
                continue

            fragment = ollama_message_text(data) if is_ollama else openai_delta_text(data)
            if not fragment:
                continue

            pending += fragment
            *complete, pending = pending.split("\n")
            for text in complete:
                if text.strip():
                    yield text

        # The model's last line usually has no trailing newline
        if pending.strip():
            yield pending

    def _parse_chunk(self, line: str, chunk_model: Type[T], request_id: str) -> Optional[T]:
        try:
            return chunk_model.model_validate(json.loads(line))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                "llm_chunk_parse_error",
                request_id=request_id,
                line=line,
                error_type=type(e).__name__,
            )
            return None

    async def stream_ndjson(
        self,
        prompt: str,
        system_prompt: str,
        chunk_model: Type[T],
        max_retries: int = 1,
        retry_delay: float = 2.0,
        temperature: float = 0.7,
        request_id: Optional[str] = None,
    ) -> AsyncIterator[T]:
        """
        Stream the model's NDJSON answer as ``chunk_model`` instances.

        Lines that are not valid JSON or do not fit the model are logged and
        skipped. Connection failures and read timeouts are retried up to
        ``max_retries`` times, but only before the first chunk was yielded.
        HTTP status errors are never retried.

        Args:
            prompt: User message
            system_prompt: System message
            chunk_model: Pydantic model each output line is parsed into
            max_retries: Extra attempts after a transient failure
            retry_delay: Seconds to wait between attempts
            temperature: Sampling temperature
            request_id: Identifier used in log events (defaults to the task name)

        Raises:
            httpx.HTTPError: When the request fails for good
        """
        if not request_id:
            task = asyncio.current_task()
            request_id = task.get_name() if task else "unknown"

        is_ollama = await self._detect_ollama()
        url, payload = self._build_request(prompt, system_prompt, temperature, is_ollama)
        headers = {"Authorization": f"Bearer {self.config.api_key}"}

        logger.info(
            "llm_request_started",
            request_id=request_id,
            model=self.config.model,
            url=url,
            prompt_length=len(prompt),
            temperature=temperature,
        )
        logger.debug("llm_request_payload", request_id=request_id, payload=payload)

        for attempt in range(max_retries + 1):
            yielded = 0
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    async with client.stream("POST", url, json=payload, headers=headers) as response:
                        response.raise_for_status()
                        async for line in self._output_lines(response, is_ollama, request_id):
                            chunk = self._parse_chunk(line, chunk_model, request_id)
                            if chunk is not None:
                                yielded += 1
                                yield chunk

                logger.info("llm_request_completed", request_id=request_id, chunk_count=yielded)
                return

            except RETRYABLE_ERRORS as e:
                if yielded or attempt >= max_retries:
                    logger.error(
                        "llm_request_failed",
                        request_id=request_id,
                        attempts=attempt + 1,
                        chunks_received=yielded,
                        error=str(e),
                    )
                    raise
                logger.warning(
                    "llm_request_retry",
                    request_id=request_id,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    error_type=type(e).__name__,
                    retry_delay=retry_delay,
                )
                await asyncio.sleep(retry_delay)

            except httpx.HTTPStatusError as e:
                logger.error(
                    "llm_http_error",
                    request_id=request_id,
                    status_code=e.response.status_code,
                    error=str(e),
                )
                raise
