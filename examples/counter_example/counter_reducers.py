import asyncio

from aiostorex import create_action, create_reducer, on

# ====== Actions ======
increment = create_action("INCREMENT")
increment_async = create_action("INCREMENT_ASYNC")
decrement = create_action("DECREMENT")


# ====== Handlers ======
def increment_handler(state: int, action) -> int:
    return state + 1


async def increment_async_handler(state: int, action) -> int:
    # reducer 本身可以等待，store 在結果回來前不會提交新狀態
    await asyncio.sleep(0.5)
    return state + 1


def decrement_handler(state: int, action) -> int:
    return state - 1


# ====== Reducer ======
counter_reducer = create_reducer(
    0,
    on(increment, increment_handler),
    on(increment_async, increment_async_handler),
    on(decrement, decrement_handler),
)
