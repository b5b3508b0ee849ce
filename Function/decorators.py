"""
Function/decorators.py

처리 시간 측정 및 예외 기록을 위한 데코레이터 모듈입니다.
"""
from __future__ import annotations

import functools
import logging
import time
import traceback
from typing import Any, Callable, ParamSpec, TypeVar, Optional

P = ParamSpec("P")
R = TypeVar("R")


def _resolve_custom_logger(instance: Any) -> Optional[Any]:
    """
    인스턴스(self)가 `_logger` 또는 `logger` 속성으로 log() 메서드를 가진 로거를 보유하면 반환합니다.

    Args:
        instance (Any): 클래스 인스턴스(self)

    Returns:
        Optional[Any]: 로거 인스턴스 또는 None
    """
    if instance is None:
        return None

    for attr in ("_logger", "logger"):
        candidate = getattr(instance, attr, None)
        if candidate is not None and hasattr(candidate, "log"):
            return candidate

    return None


def _emit(custom_logger: Optional[Any], msg: str, level: str) -> None:
    if custom_logger:
        custom_logger.log(msg, level=level)
    else:
        logging.log(logging.getLevelName(level), msg)


def log_execution_time(func: Callable[P, R]) -> Callable[P, R]:
    """
    함수의 시작 시점과 소요 시간(ms)을 기록하는 데코레이터입니다.

    Returns:
        Callable: 데코레이트된 함수
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        custom_logger = _resolve_custom_logger(args[0] if args else None)
        func_name = func.__qualname__

        _emit(custom_logger, f"▶ [시작] {func_name}", "DEBUG")
        start_time = time.perf_counter()

        result = func(*args, **kwargs)

        elapsed_ms = (time.perf_counter() - start_time) * 1000.0
        _emit(custom_logger, f"◀ [완료] {func_name} (소요 시간: {elapsed_ms:.0f}ms)", "DEBUG")

        return result

    return wrapper


def safe_run(func: Callable[P, R]) -> Callable[P, R]:
    """
    함수 실행 중 발생한 예외의 Traceback을 로그에 기록하고 예외를 재전파합니다.

    Returns:
        Callable: 데코레이트된 함수

    Raises:
        Exception: 원본 함수에서 발생한 예외
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except Exception:
            custom_logger = _resolve_custom_logger(args[0] if args else None)
            tb_str = traceback.format_exc()
            _emit(custom_logger, f"'{func.__qualname__}' 실행 중 오류 발생\n[Traceback]\n{tb_str}", "ERROR")
            raise

    return wrapper
