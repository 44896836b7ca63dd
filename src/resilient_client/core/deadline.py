"""
Deadline gate: ограничение одной попытки по времени.

Каждый вызов создаёт собственный дедлайн и разрешается ровно один раз:
либо результатом action, либо Failure(TIMEOUT, 408).
"""

import asyncio
import concurrent.futures
import logging
from typing import Awaitable, Callable

from .exceptions import ErrorKind
from .outcome import AttemptOutcome, Failure

logger = logging.getLogger(__name__)

TIMEOUT_STATUS = 408


def _check_timeout(timeout_ms: float) -> float:
    if timeout_ms <= 0:
        raise ValueError("timeout_ms must be positive")
    return timeout_ms / 1000


async def run_under_deadline(
    action: Callable[[], Awaitable[AttemptOutcome]],
    timeout_ms: float
) -> AttemptOutcome:
    """
    Выполнить action с дедлайном (async).

    При превышении дедлайна задача отменяется (asyncio.wait_for),
    если action завершился раньше - ничего не остаётся висеть в loop.

    Args:
        action: Фабрика корутины попытки
        timeout_ms: Дедлайн (мс)

    Returns:
        Результат action или Failure(TIMEOUT, 408)

    Example:
        >>> outcome = await run_under_deadline(lambda: transport.send(descriptor, 5000), 5000)
    """
    timeout = _check_timeout(timeout_ms)
    try:
        return await asyncio.wait_for(action(), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.debug(f"Attempt exceeded deadline of {timeout_ms}ms, cancelled")
        return Failure(kind=ErrorKind.TIMEOUT, status=TIMEOUT_STATUS, cause=e)


def run_under_deadline_sync(
    action: Callable[[], AttemptOutcome],
    timeout_ms: float
) -> AttemptOutcome:
    """
    Выполнить action с дедлайном (sync).

    action выполняется в отдельном потоке; вызывающий ждёт не дольше
    timeout_ms. Поток не прерывается принудительно - транспорт сам
    получает тот же таймаут и завершается, результат отбрасывается.

    Args:
        action: Функция попытки
        timeout_ms: Дедлайн (мс)

    Returns:
        Результат action или Failure(TIMEOUT, 408)
    """
    timeout = _check_timeout(timeout_ms)
    executor = concurrent.futures.ThreadPoolExecutor(
        max_workers=1,
        thread_name_prefix="resilient-client-attempt"
    )
    try:
        future = executor.submit(action)
        try:
            return future.result(timeout=timeout)
        except concurrent.futures.TimeoutError as e:
            future.cancel()
            logger.debug(f"Attempt exceeded deadline of {timeout_ms}ms, abandoned")
            return Failure(kind=ErrorKind.TIMEOUT, status=TIMEOUT_STATUS, cause=e)
    finally:
        executor.shutdown(wait=False)
