"""
將多個 slice reducer 合併為單一的根 reducer。

合併後的 reducer 是 coroutine 函數：每個 slice reducer 都可以是同步或非同步的，
依照註冊順序逐一等待，全部完成後才比較引用是否改變。
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Set, Tuple

from immutables import Map

from . import diagnostics
from .actions import ActionTypes, get_action_type
from .errors import ReducerError
from .types import Reducer
from .utils import resolve

logger = logging.getLogger(__name__)


def _quote_keys(keys: List[Any]) -> str:
    return '"' + '", "'.join(str(key) for key in keys) + '"'


def _undefined_state_error_message(key: str, action: Any) -> str:
    action_type = get_action_type(action)
    action_name = f'"{action_type}"' if action_type else "an action"
    return (
        f'Given action {action_name}, reducer "{key}" returned None. '
        "To ignore an action, you must explicitly return the previous state."
    )


def _unexpected_state_shape_warning_message(
    input_state: Any,
    reducers: Dict[str, Reducer],
    action: Any,
    unexpected_key_cache: Dict[Any, bool],
    reported_shapes: Set[Tuple[str, str]],
) -> Optional[str]:
    reducer_keys = list(reducers)
    if get_action_type(action) == ActionTypes.INIT:
        argument_name = "preloaded_state argument passed to create_store"
    else:
        argument_name = "previous state received by the reducer"

    if not reducer_keys:
        if ("empty", "") in reported_shapes:
            return None
        reported_shapes.add(("empty", ""))
        return (
            "Store does not have a valid reducer. Make sure the argument passed "
            "to combine_reducers is a mapping whose values are reducers."
        )

    if not isinstance(input_state, Mapping):
        # 同一種參數與類型的組合只提示一次
        signature = (argument_name, type(input_state).__name__)
        if signature in reported_shapes:
            return None
        reported_shapes.add(signature)
        return (
            f'The {argument_name} has unexpected type of "{type(input_state).__name__}". '
            f"Expected argument to be an object with the following keys: {_quote_keys(reducer_keys)}"
        )

    unexpected_keys = [
        key for key in input_state
        if key not in reducers and not unexpected_key_cache.get(key)
    ]
    for key in unexpected_keys:
        unexpected_key_cache[key] = True

    if get_action_type(action) == ActionTypes.REPLACE:
        return None

    if unexpected_keys:
        return (
            f"Unexpected {'keys' if len(unexpected_keys) > 1 else 'key'} "
            f"{_quote_keys(unexpected_keys)} found in {argument_name}. "
            f"Expected to find one of the known reducer keys instead: "
            f"{_quote_keys(reducer_keys)}. Unexpected keys will be ignored."
        )
    return None


async def _assert_reducer_shape(reducers: Dict[str, Reducer]) -> None:
    for key, reducer in reducers.items():
        initial_state = await resolve(reducer(None, {"type": ActionTypes.INIT}))
        if initial_state is None:
            raise ReducerError(
                f'Reducer "{key}" returned None during initialization. '
                "If the state passed to the reducer is None, you must "
                "explicitly return the initial state.",
                reducer_name=key,
                action_type=ActionTypes.INIT,
            )

        probe_type = ActionTypes.probe_unknown_action()
        if await resolve(reducer(None, {"type": probe_type})) is None:
            raise ReducerError(
                f'Reducer "{key}" returned None when probed with a random type. '
                f'Don\'t try to handle {ActionTypes.INIT} or other actions in the "aiostorex/*" '
                "namespace. They are considered private. Instead, you must return the "
                "current state for any unknown actions, unless it is None, in which case "
                "you must return the initial state, regardless of the action type.",
                reducer_name=key,
                action_type=probe_type,
            )


def combine_reducers(reducers: Mapping) -> Reducer:
    """
    將 slice reducer 映射合併為單一 reducer。

    只有可呼叫的項目會被保留，其餘項目會被忽略並輸出診斷訊息。

    Args:
        reducers: 鍵名到 reducer 的映射

    Returns:
        coroutine reducer，接收 (state, action) 並返回與 reducers 相同鍵的新 state
    """
    final_reducers: Dict[str, Reducer] = {}
    for key, reducer in reducers.items():
        if callable(reducer):
            final_reducers[key] = reducer
        else:
            diagnostics.warning(f'No reducer provided for key "{key}"')

    unexpected_key_cache: Dict[Any, bool] = {}
    reported_shapes: Set[Tuple[str, str]] = set()
    shape_checked = False
    shape_assertion_error: Optional[Exception] = None

    async def combination(state: Any = None, action: Any = None) -> Any:
        nonlocal shape_checked, shape_assertion_error

        if not shape_checked:
            shape_checked = True
            try:
                await _assert_reducer_shape(final_reducers)
            except Exception as err:  # 記住失敗，之後每次呼叫都重新拋出
                shape_assertion_error = err
        if shape_assertion_error is not None:
            raise shape_assertion_error

        if state is None:
            state = {}

        warning_message = _unexpected_state_shape_warning_message(
            state, final_reducers, action, unexpected_key_cache, reported_shapes
        )
        if warning_message:
            diagnostics.warning(warning_message)

        if not isinstance(state, Mapping):
            # 類型不符已經提示過，以空的 state 繼續計算
            previous: Mapping = {}
        else:
            previous = state

        has_changed = False
        next_state: Dict[str, Any] = {}
        for key, reducer in final_reducers.items():
            previous_slice = previous.get(key)
            next_slice = await resolve(reducer(previous_slice, action))
            if next_slice is None:
                raise ReducerError(
                    _undefined_state_error_message(key, action),
                    reducer_name=key,
                    action_type=get_action_type(action),
                )
            next_state[key] = next_slice
            has_changed = has_changed or next_slice is not previous_slice

        if not has_changed:
            return state

        logger.debug("combined state changed for action %r", get_action_type(action))
        if isinstance(state, Map):
            return Map(next_state)
        return next_state

    return combination
