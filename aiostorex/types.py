"""
AioStoreX 共用的類型定義。

Reducer、Listener、Middleware 與 Enhancer 都允許是一般函數或 coroutine 函數，
因此回傳值以 ``MaybeAwaitable`` 表示。
"""
from typing import Any, Awaitable, Callable, TypeVar, Union

S = TypeVar("S")
A = TypeVar("A")
T = TypeVar("T")

MaybeAwaitable = Union[T, Awaitable[T]]

# (state, action) -> next_state
Reducer = Callable[[Any, Any], MaybeAwaitable[Any]]
ReducerMap = dict

Listener = Callable[[], MaybeAwaitable[None]]
Unsubscribe = Callable[[], None]

DispatchFunction = Callable[..., Any]
NextDispatch = DispatchFunction
GetState = Callable[[], Any]

# api -> next_dispatch -> dispatch
MiddlewareFunction = Callable[[NextDispatch], DispatchFunction]
Middleware = Callable[[Any], MiddlewareFunction]

StoreCreator = Callable[..., Awaitable[Any]]
StoreEnhancer = Callable[[StoreCreator], StoreCreator]

# (dispatch, get_state[, extra]) -> result
ThunkFunction = Callable[..., Any]
