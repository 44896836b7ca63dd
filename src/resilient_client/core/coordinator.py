"""
Retry coordinator: последовательность попыток одного логического запроса.

attempt i: transport (под deadline gate) -> decoder -> classifier
    None                       -> RequestResult(success=True)
    retryable и i < max_retries -> ждать policy.delay_ms(i), attempt i+1
    иначе                      -> raise ApiError

Наружу выходит только ApiError.
"""

import time
from typing import Any, Awaitable, Callable, Optional, Tuple, TYPE_CHECKING

from .config import RetryPolicy
from .context import RequestDescriptor
from .deadline import run_under_deadline, run_under_deadline_sync
from .decoder import ResponseDecoder
from .error_handler import ErrorClassifier
from .exceptions import ApiError, ErrorKind
from .outcome import AttemptOutcome, Failure
from .result import RequestResult
from .retry_engine import RetryEngine
from .transport import AsyncTransport, SyncTransport

if TYPE_CHECKING:
    from .logging import ClientLogger


class _BaseCoordinator:
    """Общая часть: разбор результата попытки и логирование."""

    def __init__(
        self,
        decoder: Optional[ResponseDecoder] = None,
        classifier: Optional[ErrorClassifier] = None,
        logger: Optional['ClientLogger'] = None,
    ):
        self._decoder = decoder or ResponseDecoder()
        self._classifier = classifier or ErrorClassifier()
        self._logger = logger

    def _resolve(self, outcome: AttemptOutcome) -> Tuple[Optional[ApiError], Optional[RequestResult]]:
        """
        Декодировать и классифицировать результат попытки.

        Returns:
            (ApiError, None) при ошибке или (None, RequestResult) при успехе
        """
        if isinstance(outcome, Failure):
            return self._classifier.classify(outcome), None

        try:
            data = self._decoder.decode(outcome.raw_body, outcome.content_type)
        except Exception as e:
            # ResponseDecodeError и всё, что пропустила своя стратегия
            failure = Failure(kind=ErrorKind.UNKNOWN, status=outcome.status, cause=e)
            return self._classifier.classify(failure), None

        error = self._classifier.classify(outcome, data)
        if error is not None:
            return error, None
        return None, RequestResult(success=True, data=data, status_code=outcome.status)

    def _log_retry(self, descriptor: RequestDescriptor, engine: RetryEngine, error: ApiError) -> None:
        if self._logger:
            self._logger.warning(
                "Attempt failed, retrying",
                method=descriptor.method,
                endpoint=descriptor.path,
                attempt=f"{engine.attempt + 1}/{engine.max_attempts}",
                kind=error.kind.value,
                status_code=error.status_code,
                delay_ms=round(engine.get_wait_time() * 1000),
            )

    def _log_success(self, descriptor: RequestDescriptor, engine: RetryEngine,
                     result: RequestResult, start_time: float) -> None:
        if self._logger:
            self._logger.info(
                "Request completed",
                method=descriptor.method,
                url=descriptor.url,
                status_code=result.status_code,
                attempt=engine.attempt + 1,
                duration_ms=round((time.monotonic() - start_time) * 1000, 2),
            )

    def _log_failure(self, descriptor: RequestDescriptor, engine: RetryEngine, error: ApiError) -> None:
        if self._logger:
            self._logger.error(
                "Request failed",
                method=descriptor.method,
                url=descriptor.url,
                kind=error.kind.value,
                status_code=error.status_code,
                error=error.message,
                attempts=engine.attempt + 1,
            )

    @staticmethod
    def _raise(error: ApiError) -> None:
        cause = error.cause if isinstance(error.cause, BaseException) else None
        raise error from cause


class RetryCoordinator(_BaseCoordinator):
    """
    Синхронный координатор попыток.

    Example:
        >>> coordinator = RetryCoordinator(SyncTransport())
        >>> result = coordinator.execute(descriptor, timeout_ms=10000, policy=RetryPolicy())
    """

    def __init__(
        self,
        transport: SyncTransport,
        decoder: Optional[ResponseDecoder] = None,
        classifier: Optional[ErrorClassifier] = None,
        logger: Optional['ClientLogger'] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        super().__init__(decoder, classifier, logger)
        self._transport = transport
        self._sleep = sleep

    def _attempt(self, descriptor: RequestDescriptor, timeout_ms: float) -> AttemptOutcome:
        def action() -> AttemptOutcome:
            return self._transport.send(descriptor, timeout_ms)

        try:
            return run_under_deadline_sync(action, timeout_ms)
        except Exception as e:
            # Всё, что транспорт не классифицировал сам
            return Failure(kind=ErrorKind.UNKNOWN, cause=e)

    def execute(self, descriptor: RequestDescriptor, timeout_ms: float, policy: RetryPolicy) -> RequestResult:
        """
        Выполнить логический запрос с retry.

        Args:
            descriptor: Описание запроса
            timeout_ms: Дедлайн каждой попытки (мс)
            policy: Политика retry

        Returns:
            RequestResult(success=True)

        Raises:
            ApiError: Терминальная ошибка
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        engine = RetryEngine(policy, sleep=self._sleep)
        start_time = time.monotonic()

        while True:
            error, result = self._resolve(self._attempt(descriptor, timeout_ms))

            if error is None:
                self._log_success(descriptor, engine, result, start_time)
                return result

            if not engine.should_retry(error):
                self._log_failure(descriptor, engine, error)
                self._raise(error)

            self._log_retry(descriptor, engine, error)
            engine.wait()
            engine.increment()


class AsyncRetryCoordinator(_BaseCoordinator):
    """
    Асинхронный координатор попыток.

    Точки приостановки: ожидание транспорта (под дедлайном) и backoff.
    """

    def __init__(
        self,
        transport: AsyncTransport,
        decoder: Optional[ResponseDecoder] = None,
        classifier: Optional[ErrorClassifier] = None,
        logger: Optional['ClientLogger'] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        super().__init__(decoder, classifier, logger)
        self._transport = transport
        self._sleep = sleep

    async def _attempt(self, descriptor: RequestDescriptor, timeout_ms: float) -> AttemptOutcome:
        try:
            return await run_under_deadline(
                lambda: self._transport.send(descriptor, timeout_ms),
                timeout_ms
            )
        except Exception as e:
            return Failure(kind=ErrorKind.UNKNOWN, cause=e)

    async def execute(self, descriptor: RequestDescriptor, timeout_ms: float, policy: RetryPolicy) -> RequestResult:
        """
        Выполнить логический запрос с retry (async).

        Raises:
            ApiError: Терминальная ошибка
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        engine = RetryEngine(policy, async_sleep=self._sleep)
        start_time = time.monotonic()

        while True:
            error, result = self._resolve(await self._attempt(descriptor, timeout_ms))

            if error is None:
                self._log_success(descriptor, engine, result, start_time)
                return result

            if not engine.should_retry(error):
                self._log_failure(descriptor, engine, error)
                self._raise(error)

            self._log_retry(descriptor, engine, error)
            await engine.async_wait()
            engine.increment()
