"""
Chat model access shared by every analysis function.

Each analysis sends a system and a user message, asks for a JSON object
response and parses the reply with the tolerant JSON extractor.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_deepseek import ChatDeepSeek
from pydantic import BaseModel

from resume_tailor.config import settings
from resume_tailor.utils.parser import extract_json

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """A model-backed analysis step failed."""


def get_chat_model() -> BaseChatModel:
    """Create the configured chat model."""
    if not settings.deepseek_api_key:
        raise ValueError("DEEPSEEK_API_KEY not set")

    return ChatDeepSeek(
        model=settings.llm_model,
        api_key=settings.deepseek_api_key,
        temperature=settings.llm_temperature,
    )


@contextmanager
def analysis_step(operation: str) -> Iterator[None]:
    """Re-raise any failure inside the block as ``AnalysisError("Failed to <operation>: ...")``."""
    try:
        yield
    except AnalysisError:
        raise
    except Exception as e:
        logger.error("Failed to %s: %s", operation, e)
        raise AnalysisError(f"Failed to {operation}: {e}") from e


def _response_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    # Content blocks
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def invoke_json(system_prompt: str, user_prompt: str, llm: BaseChatModel | None = None) -> dict:
    """Send one prompt pair and return the JSON object from the reply."""
    model = llm or get_chat_model()
    response = model.invoke(
        [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)],
        response_format={"type": "json_object"},
    )
    data = extract_json(_response_text(response.content))
    if not isinstance(data, dict):
        raise ValueError("Model response did not contain a JSON object")
    return data


def to_json(value: Any) -> str:
    """Serialize models and plain data for embedding into a prompt."""
    if isinstance(value, BaseModel):
        value = value.model_dump()
    return json.dumps(value, indent=2, default=str)
