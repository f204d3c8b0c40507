# marksense/infrastructure/ai/openai_client.py
from typing import Optional
from openai import AsyncOpenAI
from marksense.core.config import Settings


def build_openai(settings: Settings) -> Optional[AsyncOpenAI]:
    """
    Devuelve un cliente asíncrono compatible con OpenAI si hay API key.
    Sin reintentos: un fallo se degrada en AIService, no se repite.
    """
    if not settings.openai_api_key:
        return None
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.ai_timeout_seconds,
        max_retries=0,
    )
