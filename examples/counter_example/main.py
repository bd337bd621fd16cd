import asyncio

from aiostorex import create_store
from counter_reducers import counter_reducer, decrement, increment, increment_async


async def main():
    store = await create_store(counter_reducer)

    def render():
        print(f"Clicked: {store.get_state()} times")

    render()
    store.subscribe(render)

    async def increment_if_odd():
        if store.get_state() % 2 != 0:
            await store.dispatch(increment())

    # 分發actions
    print("\n==== 開始測試基本操作 ====")
    await store.dispatch(increment())
    await store.dispatch(decrement())
    await store.dispatch(increment())
    await increment_if_odd()

    # 觸發異步action
    print("\n==== 開始測試異步操作 ====")
    await store.dispatch(increment_async())

    print("\n==== 最終狀態 ====")
    print(store.get_state())


if __name__ == "__main__":
    asyncio.run(main())
