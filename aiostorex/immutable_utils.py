"""
state 與不可變結構之間的轉換。

Store 不要求 state 必須是不可變的，但 reducer 不能原地修改 state；
``to_immutable`` 可以把初始狀態凍結起來，``to_dict`` 則用於日誌與除錯輸出。
"""
from collections.abc import Mapping
from typing import Any

from immutables import Map
from pydantic import BaseModel


def to_immutable(obj: Any) -> Any:
    """將任何對象轉換為不可變形式 (包括 Pydantic 模型)"""
    if isinstance(obj, BaseModel):
        obj = obj.model_dump()
    if isinstance(obj, Mapping):
        return Map({key: to_immutable(value) for key, value in obj.items()})
    if isinstance(obj, (list, tuple)):
        return tuple(to_immutable(item) for item in obj)
    if isinstance(obj, (set, frozenset)):
        return frozenset(to_immutable(item) for item in obj)
    return obj


def to_dict(obj: Any) -> Any:
    """
    將 Map、Pydantic 模型及其巢狀結構轉換為普通的 dict / list / set。

    Args:
        obj: 任意 state 值

    Returns:
        只由內建容器組成的等價結構
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if isinstance(obj, Mapping):
        return {key: to_dict(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    if isinstance(obj, frozenset):
        return {to_dict(item) for item in obj}
    return obj
