from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import requests

from ..core.constants import DEFAULT_TIMEOUT_SECONDS


@dataclass
class ApiConfig:
    base_url: str
    token: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


class ApiConnection:
    """Singleton-like factory for the backend HTTP session.

    Note: One pooled requests.Session is shared by every repository.
    """

    _instance: Optional["ApiConnection"] = None

    def __init__(self, config: ApiConfig, *, session_factory: Callable[[], requests.Session] = requests.Session):
        self._config = config
        self._session_factory = session_factory
        self._session: Optional[requests.Session] = None

    @classmethod
    def get_instance(cls, config: ApiConfig) -> "ApiConnection":
        if cls._instance is None:
            cls._instance = ApiConnection(config)
        return cls._instance

    @property
    def timeout(self) -> float:
        return float(self._config.timeout_seconds)

    def url(self, path: str) -> str:
        return self._config.base_url.rstrip("/") + "/" + path.lstrip("/")

    def session(self) -> requests.Session:
        if self._session is None:
            session = self._session_factory()
            session.headers.update({"Accept": "application/json"})
            if self._config.token:
                session.headers.update({"Authorization": f"Bearer {self._config.token}"})
            self._session = session
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
