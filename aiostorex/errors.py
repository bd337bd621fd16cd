"""
AioStoreX 錯誤處理模組。

所有由 store 主動拋出的錯誤都繼承自 ``StorexError``，
並攜帶 ``message`` 與結構化的 ``details``，方便記錄與回報。
"""
import traceback
from typing import Any, Dict, Optional


class StorexError(Exception):
    """所有 AioStoreX 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.traceback = "".join(traceback.format_stack(limit=10)[:-1])

    def to_dict(self) -> Dict[str, Any]:
        """
        將錯誤轉換為可序列化的字典。

        Returns:
            包含錯誤類型、訊息與細節的字典
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        return self.message


class ConfigurationError(StorexError, TypeError):
    """
    配置相關的錯誤：傳入的 reducer、listener、enhancer 等不可呼叫，
    或 observer 格式不正確。
    """

    def __init__(self, message: str, component: str, config_key: Optional[str] = None, **kwargs: Any) -> None:
        details = {"component": component, **kwargs}
        if config_key is not None:
            details["config_key"] = config_key
        super().__init__(message, details)
        self.component = component
        self.config_key = config_key


class ReducerError(StorexError):
    """Reducer 回傳了 None，或無法通過初始化檢查。"""

    def __init__(self, message: str, reducer_name: str, action_type: Any = None, **kwargs: Any) -> None:
        super().__init__(message, {"reducer_name": reducer_name, "action_type": action_type, **kwargs})
        self.reducer_name = reducer_name
        self.action_type = action_type


class StoreError(StorexError):
    """與 Store 狀態機相關的錯誤，例如在 reducer 執行中再次 dispatch。"""

    def __init__(self, message: str, operation: str, **kwargs: Any) -> None:
        super().__init__(message, {"operation": operation, **kwargs})
        self.operation = operation
