from __future__ import annotations

import atexit
import threading
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

_ENGINE_CACHE: dict[str, Engine] = {}
_ENGINE_LOCK = threading.Lock()


def build_db_url(db_path: Path) -> str:
    return f"sqlite+pysqlite:///{db_path}"


def get_engine(db_path: Path) -> Engine:
    key = str(db_path.resolve())
    with _ENGINE_LOCK:
        engine = _ENGINE_CACHE.get(key)
        if engine is not None:
            return engine

        db_path.parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            build_db_url(db_path),
            future=True,
            connect_args={"check_same_thread": False},
        )
        _ENGINE_CACHE[key] = engine
        return engine


def dispose_engine(db_path: Path) -> None:
    key = str(db_path.resolve())
    with _ENGINE_LOCK:
        engine = _ENGINE_CACHE.pop(key, None)
    if engine is not None:
        engine.dispose()


def dispose_all_engines() -> None:
    with _ENGINE_LOCK:
        engines = list(_ENGINE_CACHE.values())
        _ENGINE_CACHE.clear()
    for engine in engines:
        engine.dispose()


atexit.register(dispose_all_engines)
