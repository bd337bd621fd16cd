"""
基於 AioStoreX 的中介軟體定義模組。

此模組提供常用的中介軟體，用於在動作分發過程中插入自定義邏輯，
實現 thunk、日誌記錄與歷史記錄等功能。所有中介軟體都遵循
``api -> next_dispatch -> action -> result`` 的形狀，可直接傳給 ``apply_middleware``。
"""

import contextlib
import datetime
import logging
from typing import Any, Dict, Generator, List, Optional, Tuple

from .actions import get_action_type
from .apply_middleware import MiddlewareAPI
from .immutable_utils import to_dict
from .types import DispatchFunction, MiddlewareFunction, NextDispatch
from .utils import resolve

ActionContext = Dict[str, Any]

_NO_EXTRA_ARGUMENT = object()


# ———— Base Middleware ————
class BaseMiddleware:
    """
    基礎中介類，定義所有中介可能實現的鉤子。

    中介軟體可以介入動作分發的流程，在動作到達 Reducer 前、
    動作處理完成後或出現錯誤時執行自定義邏輯。子類只需要覆寫鉤子。
    """

    def __call__(self, api: MiddlewareAPI) -> MiddlewareFunction:
        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            async def dispatch(action: Any, *args: Any) -> Any:
                with self.action_context(action, api.get_state()) as context:
                    context['result'] = await resolve(next_dispatch(action, *args))
                    context['next_state'] = api.get_state()
                return context['result']
            return dispatch
        return middleware

    def on_next(self, action: Any, prev_state: Any) -> None:
        """
        在 action 發送給 reducer 之前調用。

        Args:
            action: 正在 dispatch 的 Action
            prev_state: dispatch 之前的 state
        """
        pass

    def on_complete(self, next_state: Any, action: Any) -> None:
        """
        在下游 dispatch 完成之後調用。

        Args:
            next_state: dispatch 之後的最新 state
            action: 剛剛 dispatch 的 Action
        """
        pass

    def on_error(self, error: Exception, action: Any) -> None:
        """
        如果 dispatch 過程中拋出異常，則調用此鉤子。異常之後仍會向外拋出。

        Args:
            error: 拋出的異常
            action: 導致異常的 Action
        """
        pass

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        """
        以上下文管理器的形式處理 action 分發的生命週期。

        Args:
            action: 要分發的 Action
            prev_state: 分發前的狀態

        Yields:
            包含上下文數據的字典，可用於在上下文內部與外部之間傳遞數據
        """
        context: ActionContext = {
            'action': action,
            'prev_state': prev_state,
            'next_state': None,
            'result': None,
            'error': None
        }

        self.on_next(action, prev_state)

        try:
            yield context
        except Exception as err:
            context['error'] = err
            self.on_error(err, action)
            raise

        self.on_complete(context['next_state'], action)


# ———— ThunkMiddleware ————
class ThunkMiddleware:
    """
    支援 dispatch 函數 (thunk)，可以在 thunk 內執行非同步邏輯或多次 dispatch。

    thunk 以 ``thunk(dispatch, get_state)`` 呼叫；若提供了 ``extra_argument``，
    則以 ``thunk(dispatch, get_state, extra_argument)`` 呼叫。

    範例:
        ```python
        def fetch_user(user_id):
            async def thunk(dispatch, get_state):
                await dispatch(request_user(user_id))
                user = await api.fetch_user(user_id)
                await dispatch(request_user_success(user))
            return thunk

        store = await create_store(reducer, apply_middleware(ThunkMiddleware()))
        await store.dispatch(fetch_user("user123"))
        ```
    """

    def __init__(self, extra_argument: Any = _NO_EXTRA_ARGUMENT):
        self.extra_argument = extra_argument

    def __call__(self, api: MiddlewareAPI) -> MiddlewareFunction:
        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            def dispatch(action: Any, *args: Any) -> Any:
                if not callable(action):
                    return next_dispatch(action, *args)
                if self.extra_argument is _NO_EXTRA_ARGUMENT:
                    return action(api.dispatch, api.get_state)
                return action(api.dispatch, api.get_state, self.extra_argument)
            return dispatch
        return middleware


# ———— LoggerMiddleware ————
class LoggerMiddleware(BaseMiddleware):
    """
    日誌中介，記錄每個 action 發送前和發送後的 state。

    開始時間記錄在每次 dispatch 自己的 context 中，重疊的 dispatch 互不影響。

    使用場景:
    - 偵錯時需要觀察每次 state 的變化。
    - 確保 action 的執行順序正確。
    """

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        with super().action_context(action, prev_state) as context:
            context['timestamp'] = datetime.datetime.now()
            yield context
        elapsed = datetime.datetime.now() - context['timestamp']
        self.logger.log(
            self.level, "state after %s (%s): %s",
            get_action_type(action), elapsed, to_dict(context['next_state']),
        )

    def on_next(self, action: Any, prev_state: Any) -> None:
        action_type = get_action_type(action)
        self.logger.log(self.level, "dispatching %s", action_type)
        self.logger.log(self.level, "state before %s: %s", action_type, to_dict(prev_state))

    def on_error(self, error: Exception, action: Any) -> None:
        self.logger.error("error in %s: %s", get_action_type(action), error)


# ———— DevToolsMiddleware ————
class DevToolsMiddleware(BaseMiddleware):
    """
    記錄每次 action 與 state 快照，支援時間旅行調試。

    每筆記錄在該次 dispatch 完成時寫入，順序為完成順序。

    使用場景:
    - 當需要回溯 state 的變化歷史以進行調試時。
    """

    def __init__(self) -> None:
        self.history: List[Tuple[Any, Any, Any]] = []

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        with super().action_context(action, prev_state) as context:
            yield context
        self.history.append((context['prev_state'], action, context['next_state']))

    def get_history(self) -> List[Tuple[Any, Any, Any]]:
        """
        返回整個歷史快照列表。

        Returns:
            歷史快照列表，每項為 (prev_state, action, next_state)
        """
        return list(self.history)
