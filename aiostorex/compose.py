from typing import Any, Callable

from .errors import ConfigurationError


def _identity(*args: Any, **kwargs: Any) -> Any:
    return args[0] if args else None


def compose(*funcs: Callable[..., Any]) -> Callable[..., Any]:
    """
    由右至左組合函數。

    ``compose(f, g, h)(*args)`` 等同於 ``f(g(h(*args)))``：最右邊的函數接收原始參數，
    其餘每一層只接收右側函數的單一返回值。

    Args:
        *funcs: 要組合的函數

    Returns:
        組合後的函數；沒有函數時返回恆等函數，只有一個時原樣返回該函數
    """
    for index, func in enumerate(funcs):
        if not callable(func):
            raise ConfigurationError(
                f"Expected every argument of compose to be callable, got {func!r} at position {index}.",
                component="compose",
            )

    if not funcs:
        return _identity

    if len(funcs) == 1:
        return funcs[0]

    *outer, innermost = funcs

    def composed(*args: Any, **kwargs: Any) -> Any:
        result = innermost(*args, **kwargs)
        for func in reversed(outer):
            result = func(result)
        return result

    return composed
