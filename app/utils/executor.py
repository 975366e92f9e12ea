import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor

from app.config import settings


def create_store_executor(max_workers: int = None) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(
        max_workers=max_workers or settings.STORE_WORKERS,
        thread_name_prefix="presence_store",
    )


async def run_blocking(executor: ThreadPoolExecutor, func, *args):
    """Ejecuta una llamada bloqueante (Firestore) en el pool sin bloquear el event loop"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, functools.partial(func, *args))
