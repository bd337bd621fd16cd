"""
基於 AioStoreX 的 Action 定義模組。

此模組提供 Action 類別、創建 Action 的功能，以及 store 內部保留的 Action 類型。
Store 本身把 action 視為不透明的值：可以是帶有 ``"type"`` 鍵的字典，
也可以是帶有 ``type`` 屬性的物件 (例如本模組的 ``Action``)。
"""
import uuid
from collections.abc import Mapping
from typing import Any, Callable, Dict, Generic, Optional, TypeVar, Union

from immutables import Map

P = TypeVar("P")


class Action(Generic[P]):
    """
    表示一個有類型和可選負載的動作。

    泛型參數:
        P: 負載的類型

    屬性:
        type: 動作的類型
        payload: 動作的負載數據（可選）
    """
    __slots__ = ('type', 'payload')

    def __init__(self, type: Any, payload: Optional[P] = None):
        super().__setattr__('type', type)
        super().__setattr__('payload', payload)

    def __setattr__(self, name, value):
        if name not in self.__slots__:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        raise AttributeError(f"Cannot modify immutable instance attribute '{name}'")

    def __eq__(self, other):
        if not isinstance(other, Action):
            return NotImplemented
        return self.type == other.type and self.payload == other.payload

    def __hash__(self):
        try:
            return hash((self.type, self.payload))
        except TypeError:
            return hash((self.type, id(self.payload)))

    def __repr__(self):
        return f"Action(type={self.type!r}, payload={self.payload!r})"


def get_action_type(action: Any) -> Any:
    """
    讀取 action 的類型。

    Args:
        action: 字典型 action、帶 ``type`` 屬性的物件，或任意值

    Returns:
        action 的類型；無法讀取時返回 None
    """
    if isinstance(action, Mapping):
        return action.get("type")
    return getattr(action, "type", None)


def _process_payload(payload: Any) -> Any:
    """將字典負載轉為不可變的 ``Map``。"""
    if isinstance(payload, dict):
        return Map(payload)
    return payload


def create_action(action_type: Any, prepare_fn: Optional[Callable[..., Any]] = None) -> Callable[..., Action[Any]]:
    """
    創建一個 Action 生成器函數。

    Args:
        action_type: Action 的類型標識符
        prepare_fn: 可選的預處理函數，用於在創建 Action 前處理輸入參數

    Returns:
        一個可調用的函數，用於生成指定類型的 Action

    範例:
        >>> increment = create_action("[Counter] Increment")
        >>> increment()
        Action(type='[Counter] Increment', payload=None)
        >>> add = create_action("[Counter] Add", lambda amount: amount)
        >>> add(5)
        Action(type='[Counter] Add', payload=5)
    """
    def action_creator(*args: Any, **kwargs: Any) -> Action[Any]:
        if prepare_fn:
            return Action(action_type, _process_payload(prepare_fn(*args, **kwargs)))
        if len(args) == 1 and not kwargs:
            return Action(action_type, _process_payload(args[0]))
        if args or kwargs:
            payload: Dict[Union[int, str], Any] = dict(zip(range(len(args)), args))
            payload.update(kwargs)
            return Action(action_type, _process_payload(payload))
        return Action(action_type)

    # 添加 type 屬性以便於識別
    action_creator.type = action_type  # type: ignore[attr-defined]

    return action_creator


def _random_suffix() -> str:
    return ".".join(uuid.uuid4().hex[:7])


class ActionTypes:
    """
    Store 保留的私有 Action 類型。

    使用者的 reducer 不應處理這些類型：遇到未知的 action 時應返回目前的 state。
    隨機後綴確保它們不會與應用定義的類型撞名。
    """
    INIT = f"@@aiostorex/INIT{_random_suffix()}"
    REPLACE = f"@@aiostorex/REPLACE{_random_suffix()}"

    @staticmethod
    def probe_unknown_action() -> str:
        return f"@@aiostorex/PROBE_UNKNOWN_ACTION{_random_suffix()}"

