"""
與 ReactiveX 互通。

``from_store`` 將 store 的 observable 互通介面轉為 ``reactivex.Observable``，
``select`` 則只在選取的部分狀態改變時才發出值。
"""
from typing import Any, Callable, Optional

import reactivex
from reactivex import Observable
from reactivex import operators as ops
from reactivex.abc import ObserverBase, SchedulerBase
from reactivex.disposable import Disposable


def from_store(store: Any) -> Observable:
    """
    將 store 轉為 Observable：訂閱時立即發出當前狀態，之後每次 dispatch 後再發出。

    Args:
        store: 實作了 ``__observable__`` 的 store

    Returns:
        發出 store 狀態的 Observable
    """
    def subscribe(observer: ObserverBase, scheduler: Optional[SchedulerBase] = None) -> Disposable:
        subscription = store.__observable__().subscribe(observer.on_next)
        return Disposable(subscription.unsubscribe)

    return reactivex.create(subscribe)


def select(store: Any, selector: Optional[Callable[[Any], Any]] = None) -> Observable:
    """
    選擇狀態的一部分進行觀察。

    Args:
        store: 要觀察的 store
        selector: 一個函數，接收整個狀態並返回希望觀察的部分

    Returns:
        一個可觀察對象，只在選定的部分改變時發出
    """
    source = from_store(store)
    if selector is None:
        return source
    return source.pipe(
        ops.map(selector),
        ops.distinct_until_changed(),
    )
