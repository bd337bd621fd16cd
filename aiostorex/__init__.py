"""
AioStoreX：以 asyncio 為核心的單向資料流狀態容器。

Store 只透過 reducer 對 action 的回應更新狀態，提供訂閱機制與可組合的中介軟體鏈。
"""
import logging

from .errors import ConfigurationError, ReducerError, StoreError, StorexError
from .config import StoreSettings, configure, get_settings, reset_settings
from .actions import Action, ActionTypes, create_action, get_action_type
from .compose import compose
from .combine_reducers import combine_reducers
from .reducers import create_reducer, on
from .store import Store, StoreObservable, Subscription, create_store
from .apply_middleware import MiddlewareAPI, apply_middleware
from .middleware import BaseMiddleware, DevToolsMiddleware, LoggerMiddleware, ThunkMiddleware
from .immutable_utils import to_dict, to_immutable

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Errors
    "StorexError", "ConfigurationError", "ReducerError", "StoreError",

    # Config
    "StoreSettings", "configure", "get_settings", "reset_settings",

    # Actions
    "Action", "ActionTypes", "create_action", "get_action_type",

    # Core
    "compose", "combine_reducers", "create_store", "apply_middleware",
    "Store", "StoreObservable", "Subscription", "MiddlewareAPI",

    # Reducers
    "create_reducer", "on",

    # Middleware
    "BaseMiddleware", "ThunkMiddleware", "LoggerMiddleware", "DevToolsMiddleware",

    # Immutable Utils
    "to_immutable", "to_dict",
]
