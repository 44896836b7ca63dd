# src/resilient_client/core/session_manager.py
"""
Потоко-локальные requests.Session для SyncTransport.

Каждая синхронная попытка выполняется в своём рабочем потоке (deadline
gate). Брошенная по дедлайну попытка может ещё работать, когда стартует
следующая, поэтому у каждого потока своя сессия.
"""

import threading
import weakref
from typing import Callable

import requests


class ThreadSafeSessionManager:
    """
    Хранит по одной requests.Session на поток.

    Сессии создаются лениво при первом обращении из потока. Слабые ссылки
    позволяют закрыть в close_all() все ещё живые сессии, не удерживая
    сессии завершившихся потоков.

    Example:
        >>> manager = ThreadSafeSessionManager(requests.Session)
        >>> session = manager.get_session()  # сессия текущего потока
        >>> manager.close_all()
    """

    def __init__(self, session_factory: Callable[[], requests.Session] = requests.Session):
        """
        Args:
            session_factory: Создаёт и настраивает новую сессию
        """
        self._session_factory = session_factory
        self._local = threading.local()
        self._all_sessions: "weakref.WeakSet[requests.Session]" = weakref.WeakSet()
        self._sessions_lock = threading.Lock()

    def get_session(self) -> requests.Session:
        """Сессия текущего потока (создаётся при первом вызове)."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._sessions_lock:
                self._all_sessions.add(session)
        return session

    def close_all(self) -> None:
        """Закрыть сессии всех потоков. Повторный вызов безопасен."""
        self._local.session = None
        with self._sessions_lock:
            sessions = list(self._all_sessions)
            self._all_sessions.clear()

        for session in sessions:
            session.close()

    @property
    def active_sessions_count(self) -> int:
        """Сколько сессий ещё не собрано сборщиком мусора."""
        with self._sessions_lock:
            return len(self._all_sessions)
