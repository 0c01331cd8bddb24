from typing import Optional

from fastapi import Depends

from .config import Settings, get_settings
from .gemini_client import GeminiClient
from .orchestrator import ChatOrchestrator
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser


def settings() -> Settings:
    return get_settings()


def prompt_builder() -> PromptBuilder:
    return PromptBuilder()


def response_parser() -> ResponseParser:
    return ResponseParser()


def gemini_client(cfg: Settings = Depends(settings)) -> Optional[GeminiClient]:
    # None lets request validation run (and answer 400) before the missing key matters
    if not cfg.gemini_api_key:
        return None
    return GeminiClient(
        api_key=cfg.gemini_api_key,
        model=cfg.gemini_model,
        base_url=cfg.gemini_base_url,
        timeout=cfg.upstream_timeout,
    )


def orchestrator(
    client: Optional[GeminiClient] = Depends(gemini_client),
    builder: PromptBuilder = Depends(prompt_builder),
    parser: ResponseParser = Depends(response_parser),
) -> ChatOrchestrator:
    return ChatOrchestrator(client, builder, parser)
