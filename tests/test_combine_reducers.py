"""combine_reducers: slice reducers merged into one whole-state reducer.

Tests cover:
    - Key mapping, dropped non-callable entries, async slices
    - Fatal None results and the one-time shape assertion
    - Referential equality short-circuit
    - Shape-mismatch diagnostics and their de-duplication
"""

import asyncio

import pytest
from immutables import Map

from aiostorex import (
    ActionTypes,
    ReducerError,
    combine_reducers,
    configure,
    create_store,
    get_action_type,
)


def counter(state=None, action=None):
    state = 0 if state is None else state
    return state + 1 if get_action_type(action) == "increment" else state


def stack(state=None, action=None):
    state = [] if state is None else state
    if get_action_type(action) == "push":
        return [*state, action["value"]]
    return state


def identity_slice(state=None, action=None):
    return {} if state is None else state


@pytest.mark.asyncio
async def test_maps_state_keys_to_given_reducers():
    reducer = combine_reducers({"counter": counter, "stack": stack})

    s1 = await reducer({}, {"type": "increment"})
    assert s1 == {"counter": 1, "stack": []}
    s2 = await reducer(s1, {"type": "push", "value": "a"})
    assert s2 == {"counter": 1, "stack": ["a"]}


@pytest.mark.asyncio
async def test_ignores_all_entries_which_are_not_callable(store_warnings):
    reducer = combine_reducers({
        "fake": True,
        "broken": "string",
        "another": {"nested": "object"},
        "stack": lambda state=None, action=None: [] if state is None else state,
    })

    assert list(await reducer({}, {"type": "push"})) == ["stack"]
    assert 'No reducer provided for key "fake"' in store_warnings()
    assert 'No reducer provided for key "another"' in store_warnings()


def test_warns_if_a_reducer_entry_is_none(store_warnings):
    combine_reducers({"is_not_defined": None})
    assert store_warnings()[0] == 'No reducer provided for key "is_not_defined"'


@pytest.mark.asyncio
async def test_throws_if_a_reducer_returns_none_handling_an_action():
    def nullable_counter(state=None, action=None):
        state = 0 if state is None else state
        action_type = get_action_type(action)
        if action_type == "increment":
            return state + 1
        if action_type in ("whatever", None):
            return None
        return state

    reducer = combine_reducers({"counter": nullable_counter})

    with pytest.raises(ReducerError, match='"whatever".*"counter"'):
        await reducer({"counter": 0}, {"type": "whatever"})
    with pytest.raises(ReducerError, match='an action, reducer "counter"'):
        await reducer({"counter": 0}, None)
    with pytest.raises(ReducerError, match='an action, reducer "counter"') as excinfo:
        await reducer({"counter": 0}, {})

    assert excinfo.value.reducer_name == "counter"


@pytest.mark.asyncio
async def test_throws_on_first_call_if_a_reducer_returns_none_initializing():
    def uninitialized(state, action):
        if action["type"] == "increment":
            return state + 1
        return state

    reducer = combine_reducers({"counter": uninitialized})

    with pytest.raises(ReducerError, match='"counter".*initialization'):
        await reducer()


@pytest.mark.asyncio
async def test_reraises_the_cached_initialization_error_without_retrying():
    calls = []

    def throwing_reducer(state=None, action=None):
        calls.append(action)
        raise RuntimeError("Error thrown in reducer")

    reducer = combine_reducers({"throwing": throwing_reducer})

    with pytest.raises(RuntimeError, match="Error thrown in reducer"):
        await reducer({})
    with pytest.raises(RuntimeError, match="Error thrown in reducer"):
        await reducer({})
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_throws_if_a_reducer_attempts_to_handle_a_private_action():
    def private_counter(state=None, action=None):
        if get_action_type(action) == ActionTypes.INIT:
            return 0
        return None

    reducer = combine_reducers({"counter": private_counter})

    with pytest.raises(ReducerError, match='"counter".*private'):
        await reducer()


@pytest.mark.asyncio
async def test_allows_arbitrary_objects_as_action_types():
    increment = object()

    def symbol_counter(state=None, action=None):
        state = 0 if state is None else state
        return state + 1 if get_action_type(action) is increment else state

    reducer = combine_reducers({"counter": symbol_counter})

    assert (await reducer({"counter": 0}, {"type": increment}))["counter"] == 1


@pytest.mark.asyncio
async def test_maintains_referential_equality_if_slices_do():
    reducer = combine_reducers({
        "child1": identity_slice,
        "child2": identity_slice,
        "child3": identity_slice,
    })

    initial_state = await reducer(None, "@@INIT")
    assert await reducer(initial_state, {"type": "FOO"}) is initial_state


@pytest.mark.asyncio
async def test_returns_a_new_object_if_one_slice_changes():
    def child2(state=None, action=None):
        state = {"count": 0} if state is None else state
        if get_action_type(action) == "increment":
            return {"count": state["count"] + 1}
        return state

    reducer = combine_reducers({
        "child1": identity_slice,
        "child2": child2,
        "child3": identity_slice,
    })

    initial_state = await reducer(None, "@@INIT")
    next_state = await reducer(initial_state, {"type": "increment"})
    assert next_state is not initial_state
    assert next_state["child1"] is initial_state["child1"]
    assert next_state["child2"] == {"count": 1}


@pytest.mark.asyncio
async def test_awaits_async_slices_in_key_order():
    order = []

    async def slow(state=None, action=None):
        await asyncio.sleep(0.01)
        order.append("slow")
        return "slow" if state is None else state

    async def fast(state=None, action=None):
        order.append("fast")
        return "fast" if state is None else state

    reducer = combine_reducers({"slow": slow, "fast": fast})

    state = await reducer({}, {"type": "anything"})
    assert list(state) == ["slow", "fast"]
    assert order[-2:] == ["slow", "fast"]
    assert await reducer(state, {"type": "anything"}) is state


@pytest.mark.asyncio
async def test_keeps_immutable_map_states_immutable():
    reducer = combine_reducers({"counter": counter})

    state = await reducer(Map(counter=0), {"type": "increment"})
    assert isinstance(state, Map)
    assert state["counter"] == 1
    assert await reducer(state, {"type": "noop"}) is state


@pytest.mark.asyncio
async def test_warns_if_no_reducers_are_passed(store_warnings):
    reducer = combine_reducers({})

    state = {}
    assert await reducer(state) is state
    assert "Store does not have a valid reducer" in store_warnings()[0]
    assert await reducer() == {}


@pytest.mark.asyncio
async def test_warns_if_input_state_does_not_match_reducer_shape(store_warnings):
    def foo(state=None, action=None):
        return {"bar": 1} if state is None else state

    def baz(state=None, action=None):
        return {"qux": 3} if state is None else state

    reducer = combine_reducers({"foo": foo, "baz": baz})

    await reducer()
    assert store_warnings() == []

    await reducer({"foo": {"bar": 2}})
    assert store_warnings() == []

    await reducer({"foo": {"bar": 2}, "baz": {"qux": 4}})
    assert store_warnings() == []

    await create_store(reducer, {"bar": 2})
    assert store_warnings()[0].startswith('Unexpected key "bar" found in preloaded_state argument passed to create_store.')
    assert store_warnings()[0].endswith('instead: "foo", "baz". Unexpected keys will be ignored.')

    await create_store(reducer, {"bar": 2, "qux": 4, "thud": 5})
    assert store_warnings()[1].startswith('Unexpected keys "qux", "thud" found in preloaded_state argument passed to create_store.')

    await create_store(reducer, 1)
    assert store_warnings()[2] == (
        'The preloaded_state argument passed to create_store has unexpected type of "int". '
        'Expected argument to be an object with the following keys: "foo", "baz"'
    )

    await reducer({"corge": 2})
    assert store_warnings()[3].startswith('Unexpected key "corge" found in previous state received by the reducer.')

    await reducer({"fred": 2, "grault": 4})
    assert store_warnings()[4].startswith('Unexpected keys "fred", "grault" found in previous state received by the reducer.')

    await reducer(1)
    assert store_warnings()[5].startswith('The previous state received by the reducer has unexpected type of "int".')
    assert len(store_warnings()) == 6


@pytest.mark.asyncio
async def test_only_warns_for_unexpected_keys_once(store_warnings):
    def foo(state=None, action=None):
        return {"foo": 1} if state is None else state

    def bar(state=None, action=None):
        return {"bar": 2} if state is None else state

    reducer = combine_reducers({"foo": foo, "bar": bar})
    state = {"foo": 1, "bar": 2, "qux": 3}

    for _ in range(4):
        await reducer(state, {})
    assert len(store_warnings()) == 1

    for _ in range(4):
        await reducer({**state, "baz": 5}, {})
    assert len(store_warnings()) == 2


@pytest.mark.asyncio
async def test_shape_diagnostics_never_alter_the_result():
    reducer = combine_reducers({"counter": counter})

    assert await reducer({"counter": 1, "extra": True}, {"type": "increment"}) == {"counter": 2}


@pytest.mark.asyncio
async def test_diagnostics_are_silent_in_production(store_warnings):
    configure(env="production", diagnostics=None)

    reducer = combine_reducers({"broken": None, "counter": counter})
    await reducer({"unexpected": 1}, {"type": "increment"})

    assert store_warnings() == []


@pytest.mark.asyncio
async def test_only_warns_once_per_unexpected_state_type(store_warnings):
    reducer = combine_reducers({"counter": counter})

    for _ in range(3):
        await reducer(1, {"type": "noop"})
    assert len(store_warnings()) == 1

    await reducer("text", {"type": "noop"})
    await reducer(2, {"type": "noop"})
    assert len(store_warnings()) == 2
    assert 'unexpected type of "str"' in store_warnings()[1]


@pytest.mark.asyncio
async def test_only_warns_once_about_an_empty_reducer_map(store_warnings):
    reducer = combine_reducers({})

    await reducer({})
    await reducer({})

    assert len(store_warnings()) == 1
