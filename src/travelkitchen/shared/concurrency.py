import asyncio
from travelkitchen.shared.config.settings import settings

# Caps outbound model calls per worker process.
LLM_STREAM_SEMAPHORE = asyncio.Semaphore(settings.LLM_MAX_CONCURRENCY)
