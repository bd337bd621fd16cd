from typing import Any, Callable, Dict, TypeVar

from .actions import get_action_type
from .types import Reducer

S = TypeVar("S")


def create_reducer(initial_state: S, *handlers) -> Reducer:
    """
    創建一個 reducer 函式，用於處理狀態變更。

    Args:
        initial_state: 初始狀態，state 為 None 時使用
        *handlers: 一系列 (action_type, handler_fn) 元組或使用 on 函式創建的處理器。
            handler_fn 可以是 coroutine 函數，store 會等待其結果。

    Returns:
        一個 reducer 函式，根據 action 的類型執行對應的處理邏輯。
    """
    action_handlers: Dict[Any, Callable[[S, Any], Any]] = {}

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            action_type, handler_fn = handler
            action_handlers[action_type] = handler_fn
        else:
            action_handlers.update(handler)

    def reducer(state: S = None, action: Any = None) -> Any:
        if state is None:
            state = initial_state
        if action is None:
            return state

        handler = action_handlers.get(get_action_type(action))
        if handler:
            return handler(state, action)
        return state

    reducer.initial_state = initial_state  # type: ignore[attr-defined]
    reducer.handlers = action_handlers  # type: ignore[attr-defined]

    return reducer


def on(action_creator_or_type, handler):
    """
    創建一個 action 類型與處理函式的映射。

    Args:
        action_creator_or_type: Action 創建器函式或 Action 類型
        handler: 處理該 Action 的函式，接收 (state, action) 並返回新狀態。

    Returns:
        一個包含 {action_type: handler} 的字典。
    """
    if callable(action_creator_or_type) and hasattr(action_creator_or_type, 'type'):
        action_type = action_creator_or_type.type
    else:
        action_type = action_creator_or_type

    return {action_type: handler}
