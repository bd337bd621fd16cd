"""
AioStoreX 執行期設定。

設定值來自環境變數，可在程式中以 ``configure`` 覆寫：

- ``AIOSTOREX_ENV``: ``development`` (預設) 或 ``production``
- ``AIOSTOREX_DIAGNOSTICS``: 明確開啟/關閉開發期診斷訊息
"""
import os
from typing import Any, Optional

from pydantic import BaseModel, field_validator

_TRUTHY = {"1", "true", "yes", "on"}


class StoreSettings(BaseModel):
    env: str = "development"
    diagnostics: Optional[bool] = None

    @field_validator("env", mode="before")
    @classmethod
    def normalize_env(cls, value: Any) -> str:
        return str(value or "development").strip().lower()

    @property
    def diagnostics_enabled(self) -> bool:
        """未明確設定時，只有非 production 環境才輸出診斷訊息。"""
        if self.diagnostics is not None:
            return self.diagnostics
        return self.env != "production"

    @classmethod
    def from_env(cls) -> "StoreSettings":
        raw = os.environ.get("AIOSTOREX_DIAGNOSTICS")
        diagnostics = None if raw is None else raw.strip().lower() in _TRUTHY
        return cls(env=os.environ.get("AIOSTOREX_ENV", "development"), diagnostics=diagnostics)


_settings: Optional[StoreSettings] = None


def get_settings() -> StoreSettings:
    global _settings
    if _settings is None:
        _settings = StoreSettings.from_env()
    return _settings


def configure(**overrides: Any) -> StoreSettings:
    """
    覆寫目前的設定。

    Args:
        **overrides: ``StoreSettings`` 的欄位

    Returns:
        更新後的設定
    """
    global _settings
    _settings = get_settings().model_copy(update=overrides)
    return _settings


def reset_settings() -> None:
    """丟棄覆寫值，下次讀取時重新從環境變數載入。"""
    global _settings
    _settings = None
