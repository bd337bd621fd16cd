"""
中介軟體 enhancer。

``apply_middleware(*middlewares)`` 返回一個 store enhancer，
把 store 的 dispatch 包裹在由 ``compose`` 組成的中介軟體鏈中。
"""
import logging
from typing import Any, Awaitable, Callable

from .compose import compose
from .errors import StoreError
from .types import GetState, Middleware, StoreCreator, StoreEnhancer
from .utils import ensure_awaitable

logger = logging.getLogger(__name__)


class MiddlewareAPI:
    """
    傳給每個中介軟體工廠的 store 外觀，只暴露 ``get_state`` 與 ``dispatch``。

    同一個 store 的所有中介軟體拿到的是同一個實例。
    """
    __slots__ = ("get_state", "dispatch")

    def __init__(self, get_state: GetState, dispatch: Callable[..., Any]):
        self.get_state = get_state
        self.dispatch = dispatch

    def __repr__(self) -> str:
        return f"MiddlewareAPI(state={self.get_state()!r})"


def _dispatch_while_constructing(action: Any, *args: Any) -> Awaitable[Any]:
    raise StoreError(
        "Dispatching while constructing your middleware is not allowed. "
        "Other middleware would not be applied to this dispatch.",
        operation="apply_middleware",
    )


def apply_middleware(*middlewares: Middleware) -> StoreEnhancer:
    """
    創建套用中介軟體的 store enhancer。

    每個中介軟體的形狀為 ``api -> next_dispatch -> action -> result``。
    最後註冊的中介軟體最接近原始的 dispatch；中介軟體透過 ``api.dispatch``
    發出的 action 會重新經過整條鏈。

    Args:
        *middlewares: 依序套用的中介軟體

    Returns:
        store enhancer，可傳給 ``create_store`` 的 enhancer 參數
    """
    def enhancer(create_store: StoreCreator) -> StoreCreator:
        async def enhanced_create_store(reducer, preloaded_state=None, enhancer=None):
            store = await create_store(reducer, preloaded_state, enhancer)
            # 中介軟體建構完成前，dispatch 一律拒絕
            dispatch = _dispatch_while_constructing

            def middleware_dispatch(action: Any, *args: Any) -> Awaitable[Any]:
                return dispatch(action, *args)

            api = MiddlewareAPI(get_state=store.get_state, dispatch=middleware_dispatch)
            chain = [middleware(api) for middleware in middlewares]
            chained_dispatch = compose(*chain)(store.dispatch)

            def dispatch(action: Any, *args: Any) -> Awaitable[Any]:
                return ensure_awaitable(chained_dispatch(action, *args))

            logger.debug("applied %d middleware", len(middlewares))
            store.dispatch = dispatch
            return store

        return enhanced_create_store

    return enhancer
