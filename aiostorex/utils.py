import inspect
from typing import Any, Awaitable


async def resolve(value: Any) -> Any:
    """若 value 可等待則等待它，否則原樣返回。"""
    if inspect.isawaitable(value):
        return await value
    return value


def ensure_awaitable(value: Any) -> Awaitable[Any]:
    """讓呼叫端一律可以 ``await`` dispatch 的結果。"""
    if inspect.isawaitable(value):
        return value
    return resolve(value)
