"""開發期診斷訊息，只供觀察，不影響控制流程。"""
import logging

from .config import get_settings

logger = logging.getLogger("aiostorex")


def warning(message: str) -> None:
    # logging 會自行處理 handler 的錯誤，不會向外拋出
    if get_settings().diagnostics_enabled:
        logger.warning(message)
