"""
AioStoreX 範例：待辦事項應用，展示 combine_reducers、thunk、日誌與歷史記錄中介軟體
"""

import asyncio
import logging
import uuid
from typing import Optional

from pydantic import BaseModel

from aiostorex import (
    DevToolsMiddleware,
    LoggerMiddleware,
    ThunkMiddleware,
    apply_middleware,
    combine_reducers,
    create_action,
    create_reducer,
    create_store,
    on,
    to_dict,
)
from aiostorex.rx import select


# ====== 1. 定義狀態模型 ======
class TodoItem(BaseModel):
    id: str
    text: str
    completed: bool = False


class StatusState(BaseModel):
    loading: bool = False
    error: Optional[str] = None


# ====== 2. 定義 Actions ======
add_todo = create_action("[Todo] Add", lambda text: TodoItem(id=uuid.uuid4().hex[:8], text=text))
toggle_todo = create_action("[Todo] Toggle")
load_todos_request = create_action("[Todo] Load Request")
load_todos_success = create_action("[Todo] Load Success")
load_todos_failure = create_action("[Todo] Load Failure")


# ====== 3. 定義 Reducers ======
def add_handler(state, action):
    return (*state, action.payload)


def toggle_handler(state, action):
    return tuple(
        todo.model_copy(update={"completed": not todo.completed}) if todo.id == action.payload else todo
        for todo in state
    )


def load_success_handler(state, action):
    return (*state, *action.payload)


todos_reducer = create_reducer(
    (),
    on(add_todo, add_handler),
    on(toggle_todo, toggle_handler),
    on(load_todos_success, load_success_handler),
)

status_reducer = create_reducer(
    StatusState(),
    on(load_todos_request, lambda state, action: StatusState(loading=True)),
    on(load_todos_success, lambda state, action: StatusState()),
    on(load_todos_failure, lambda state, action: StatusState(error=str(action.payload))),
)

root_reducer = combine_reducers({"todos": todos_reducer, "status": status_reducer})


# ====== 4. 定義 Thunks ======
async def fake_api(fail: bool = False):
    await asyncio.sleep(0.2)
    if fail:
        raise ConnectionError("server unavailable")
    return [TodoItem(id="remote-1", text="從伺服器載入的待辦事項")]


def load_todos(fail: bool = False):
    async def thunk(dispatch, get_state, api):
        await dispatch(load_todos_request())
        try:
            todos = await api(fail)
        except ConnectionError as err:
            await dispatch(load_todos_failure(err))
            return None
        return await dispatch(load_todos_success(todos))
    return thunk


# ====== 5. 建立 Store 並執行 ======
async def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    devtools = DevToolsMiddleware()
    store = await create_store(
        root_reducer,
        apply_middleware(ThunkMiddleware(fake_api), LoggerMiddleware(), devtools),
    )

    select(store, lambda state: len(state["todos"])).subscribe(
        lambda count: print(f"待辦事項數量: {count}")
    )
    select(store, lambda state: state["status"]).subscribe(
        lambda status: print(f"載入狀態: {status.model_dump()}")
    )

    print("\n==== 開始測試基本操作 ====")
    await store.dispatch(add_todo("學習 asyncio"))
    await store.dispatch(add_todo("撰寫 reducer"))
    first_id = store.get_state()["todos"][0].id
    await store.dispatch(toggle_todo(first_id))

    print("\n==== 開始測試異步操作 ====")
    await store.dispatch(load_todos())
    await store.dispatch(load_todos(fail=True))

    print("\n==== 最終狀態 ====")
    print([todo.model_dump() for todo in store.get_state()["todos"]])
    print(f"歷史記錄共 {len(devtools.get_history())} 筆")
    print(to_dict(store.get_state()["status"]))


if __name__ == "__main__":
    asyncio.run(main())
