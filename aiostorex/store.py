import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from .actions import ActionTypes, get_action_type
from .errors import ConfigurationError, StoreError
from .types import Listener, Reducer, StoreEnhancer, Unsubscribe

S = TypeVar("S")

logger = logging.getLogger(__name__)


class Store(Generic[S]):
    """
    狀態容器，管理應用狀態並通知訂閱者狀態變更。

    公開的操作只有 ``get_state``、``dispatch``、``subscribe`` 與 ``replace_reducer``；
    observable 互通介面透過保留名稱 ``__observable__`` 取得。

    Store 應透過 ``create_store`` 建立，以確保初始化 action 已經分發。
    """

    def __init__(self, reducer: Reducer, preloaded_state: Optional[S] = None):
        """
        初始化一個尚未分發初始化 action 的 Store。

        Args:
            reducer: 根 reducer
            preloaded_state: 可選的初始狀態
        """
        self._reducer = reducer
        self._state = preloaded_state
        # 通知時會先複製成 tuple 快照，期間的訂閱/取消只影響下一次 dispatch
        self._listeners: List[Listener] = []
        self._is_dispatching = False

    def get_state(self) -> S:
        """
        獲取當前已提交的狀態。

        Returns:
            當前狀態。
        """
        return self._state

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        註冊一個 listener，在每次 dispatch 完成後被呼叫。

        Args:
            listener: 不帶參數的回調函數，可以返回 awaitable

        Returns:
            取消訂閱的函數，多次呼叫不會有額外效果
        """
        if not callable(listener):
            raise ConfigurationError(
                "Expected the listener to be a function.", component="subscribe"
            )

        self._listeners.append(listener)
        is_subscribed = True

        def unsubscribe() -> None:
            nonlocal is_subscribed
            if not is_subscribed:
                return
            is_subscribed = False
            self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Any) -> Awaitable[Any]:
        """
        分發一個動作，觸發狀態更新。

        在 reducer 執行期間呼叫會立即拋出 ``StoreError``。

        Args:
            action: 要分發的 action

        Returns:
            awaitable，完成後返回傳入的 action
        """
        self._ensure_not_dispatching()
        return self._dispatch_core(action)

    def replace_reducer(self, next_reducer: Reducer) -> Awaitable[Any]:
        """
        替換目前的 reducer，並分發內部的 REPLACE action 讓新的 slice 填入初始值。

        既有的 state 與 listeners 都會保留。

        Args:
            next_reducer: 新的 reducer

        Returns:
            REPLACE action 的 dispatch awaitable
        """
        if not callable(next_reducer):
            raise ConfigurationError(
                "Expected the next_reducer to be a function.", component="replace_reducer"
            )
        self._ensure_not_dispatching()
        self._reducer = next_reducer
        # 不經過 middleware
        return self._dispatch_core({"type": ActionTypes.REPLACE})

    def __observable__(self) -> "StoreObservable":
        """observable 互通介面：立即及每次 dispatch 後推送當前狀態。"""
        return StoreObservable(self)

    def _ensure_not_dispatching(self) -> None:
        if self._is_dispatching:
            raise StoreError("Reducers may not dispatch actions.", operation="dispatch")

    async def _dispatch_core(self, action: Any) -> Any:
        # 同一個 store 同時只能有一個 dispatch 在等待 reducer
        self._ensure_not_dispatching()

        self._is_dispatching = True
        try:
            next_state = self._reducer(self._state, action)
            if inspect.isawaitable(next_state):
                next_state = await next_state
            self._state = next_state
        finally:
            self._is_dispatching = False

        logger.debug("dispatched %r", get_action_type(action))

        for listener in tuple(self._listeners):
            result = listener()
            if inspect.isawaitable(result):
                await result

        return action


class Subscription:
    """observable 訂閱的句柄。"""

    def __init__(self, unsubscribe: Unsubscribe):
        self._unsubscribe = unsubscribe

    def unsubscribe(self) -> None:
        self._unsubscribe()

    # reactivex 的 Disposable 介面
    dispose = unsubscribe


_SCALAR_TYPES = (str, bytes, int, float, complex, bool)


def _resolve_next(observer: Any) -> Optional[Callable[[Any], Any]]:
    if observer is None or isinstance(observer, _SCALAR_TYPES):
        raise ConfigurationError(
            "Expected the observer to be an object or a callable.",
            component="observable",
        )
    if callable(observer):
        return observer
    if isinstance(observer, Mapping):
        return observer.get("on_next") or observer.get("next")
    return getattr(observer, "on_next", None) or getattr(observer, "next", None)


class StoreObservable:
    """
    最小的 observable 實作，讓其他響應式函式庫可以觀察 store。
    """

    def __init__(self, store: Store[Any]):
        self._store = store

    def subscribe(self, observer: Any) -> Subscription:
        """
        訂閱狀態變化。

        Args:
            observer: next 回調函數、含 ``on_next``/``next`` 的映射，或帶有
                ``on_next``/``next`` 方法的物件

        Returns:
            帶有 ``unsubscribe()`` 的訂閱句柄
        """
        on_next = _resolve_next(observer)
        first_emission: Optional[asyncio.Future] = None

        async def emit_after_first(state: Any) -> Any:
            await first_emission
            result = on_next(state)
            if inspect.isawaitable(result):
                return await result
            return result

        def observe_state() -> Any:
            if on_next is None:
                return None
            state = self._store.get_state()
            # 非同步的第一次推送尚未完成時，後續推送排在它之後
            if first_emission is not None and not first_emission.done():
                return emit_after_first(state)
            return on_next(state)

        result = observe_state()
        if inspect.isawaitable(result):
            # subscribe 本身是同步的，第一次推送交給事件迴圈執行
            first_emission = asyncio.ensure_future(result)
        return Subscription(self._store.subscribe(observe_state))

    def __observable__(self) -> "StoreObservable":
        return self


async def create_store(
    reducer: Reducer,
    preloaded_state: Any = None,
    enhancer: Optional[StoreEnhancer] = None,
) -> Store[Any]:
    """
    創建一個新的 Store 實例，並分發初始化 action 取得初始狀態。

    Args:
        reducer: 根 reducer
        preloaded_state: 可選的初始狀態；若為可呼叫物件且未提供 enhancer，則視為 enhancer
        enhancer: 可選的 store enhancer，例如 ``apply_middleware(...)``

    Returns:
        Store: 初始化完成的 Store 實例。
    """
    if enhancer is None and callable(preloaded_state):
        enhancer = preloaded_state
        preloaded_state = None

    if enhancer is not None:
        if not callable(enhancer):
            raise ConfigurationError(
                "Expected the enhancer to be a function.", component="create_store", config_key="enhancer"
            )
        return await enhancer(create_store)(reducer, preloaded_state)

    if not callable(reducer):
        raise ConfigurationError(
            "Expected the reducer to be a function.", component="create_store", config_key="reducer"
        )

    store: Store[Any] = Store(reducer, preloaded_state)
    await store.dispatch({"type": ActionTypes.INIT})
    return store
