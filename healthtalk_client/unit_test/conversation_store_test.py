import asyncio
import json

import httpx
import pytest

from healthtalk_client.conversation_store import (
    ConversationStore,
    DispatchOutcome,
    SessionState,
)
from healthtalk_client.prompts import GREETING, NO_REPLY_FALLBACK, SERVER_UNREACHABLE
from healthtalk_client.transport import RelayTransport


def make_store(handler) -> ConversationStore:
    return ConversationStore(RelayTransport("http://relay.test", transport=httpx.MockTransport(handler)))


def reply_with(text):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"reply": text})
    return handler


def test_new_store_has_only_greeting():
    store = make_store(reply_with("x"))

    assert [(t.role, t.content) for t in store.turns] == [("assistant", GREETING)]
    assert store.state is SessionState.IDLE
    assert not store.is_typing


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["hello", "  padded question  ", "multi\nline"])
async def test_submit_appends_user_and_assistant_turn(text):
    store = make_store(reply_with("an answer"))

    outcome = await store.submit(text)

    assert outcome is DispatchOutcome.RESOLVED
    assert len(store.turns) == 3
    user, assistant = store.turns[1], store.turns[2]
    assert (user.role, user.content) == ("user", text.strip())
    assert (assistant.role, assistant.content) == ("assistant", "an answer")
    assert store.state is SessionState.IDLE
    assert store.last_outcome is DispatchOutcome.RESOLVED


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
async def test_submit_blank_is_noop(text):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"reply": "x"})

    store = make_store(handler)
    store.set_input("   ")

    assert await store.submit(text) is None
    assert await store.submit() is None
    assert len(store.turns) == 1
    assert calls == []


@pytest.mark.asyncio
async def test_submit_uses_and_clears_input_buffer():
    store = make_store(reply_with("ok"))
    store.set_input("  from the buffer ")

    await store.submit()

    assert store.turns[1].content == "from the buffer"
    assert store.input_buffer == ""


@pytest.mark.asyncio
async def test_user_turn_is_visible_before_reply_arrives():
    seen = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        seen["turns"] = [(t.role, t.content) for t in store.turns]
        seen["typing"] = store.is_typing
        seen["body"] = request.content
        return httpx.Response(200, json={"reply": "ok"})

    store = make_store(handler)
    await store.submit("question")

    assert seen["turns"][-1] == ("user", "question")
    assert seen["typing"] is True
    assert b'"id"' not in seen["body"]
    assert not store.is_typing


@pytest.mark.asyncio
async def test_dispatch_sends_whole_history_without_ids():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(request.content)
        return httpx.Response(200, json={"reply": "answer"})

    store = make_store(handler)
    await store.submit("one")
    await store.submit("two")

    assert json.loads(bodies[-1]) == {"messages": [
        {"role": "assistant", "content": GREETING},
        {"role": "user", "content": "one"},
        {"role": "assistant", "content": "answer"},
        {"role": "user", "content": "two"},
    ]}


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"reply": ""}, {"reply": None}, {"reply": 42}])
async def test_success_without_reply_uses_fallback(body):
    store = make_store(lambda request: httpx.Response(200, json=body))

    outcome = await store.submit("hi")

    assert outcome is DispatchOutcome.RESOLVED
    assert store.turns[-1].content == NO_REPLY_FALLBACK


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"error": "Network error talking to the upstream provider"}),
    httpx.Response(400, json={"error": "messages is required"}),
    httpx.Response(502, text="Bad Gateway"),
    httpx.Response(200, text="not json"),
    httpx.Response(200, json=["not", "an", "object"]),
])
async def test_failures_append_unreachable_message(response):
    store = make_store(lambda request: response)

    outcome = await store.submit("hi")

    assert outcome is DispatchOutcome.FAILED
    assert len(store.turns) == 3
    assert (store.turns[-1].role, store.turns[-1].content) == ("assistant", SERVER_UNREACHABLE)
    assert store.state is SessionState.IDLE
    assert store.last_outcome is DispatchOutcome.FAILED


@pytest.mark.asyncio
async def test_network_error_appends_unreachable_message():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = make_store(handler)

    await store.submit("hi")

    assert store.turns[-1].content == SERVER_UNREACHABLE
    assert not store.is_typing


@pytest.mark.asyncio
async def test_inject_quick_prompt_behaves_like_submit():
    store = make_store(reply_with("contraception info"))

    await store.inject_quick_prompt("Explain contraception methods in simple terms.")

    assert [t.role for t in store.turns] == ["assistant", "user", "assistant"]
    assert store.turns[1].content == "Explain contraception methods in simple terms."


@pytest.mark.asyncio
async def test_concurrent_submits_resolve_in_arrival_order():
    release_first = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        last = json.loads(request.content)["messages"][-1]["content"]
        if last == "slow":
            await release_first.wait()
        return httpx.Response(200, json={"reply": f"re: {last}"})

    store = make_store(handler)

    slow = asyncio.create_task(store.submit("slow"))
    await asyncio.sleep(0)
    fast = asyncio.create_task(store.submit("fast"))
    await fast
    assert store.in_flight == 1
    assert store.is_typing
    release_first.set()
    await slow

    assert [t.content for t in store.turns[1:]] == ["slow", "fast", "re: fast", "re: slow"]
    assert store.in_flight == 0
    assert store.state is SessionState.IDLE


@pytest.mark.asyncio
async def test_reset_restores_single_greeting():
    store = make_store(reply_with("ok"))
    await store.submit("one")
    store.set_input("draft")

    store.reset()

    assert len(store.turns) == 1
    assert (store.turns[0].role, store.turns[0].content) == ("assistant", GREETING)
    assert store.input_buffer == ""
    assert store.state is SessionState.IDLE
    assert store.last_outcome is None


@pytest.mark.asyncio
async def test_reply_after_reset_does_not_touch_new_session():
    release = asyncio.Event()

    async def handler(request):
        await release.wait()
        return httpx.Response(200, json={"reply": "late"})

    store = make_store(handler)
    pending = asyncio.create_task(store.submit("before reset"))
    await asyncio.sleep(0)
    assert store.is_typing

    store.reset()
    assert not store.is_typing
    release.set()
    await pending

    assert len(store.turns) == 1
    assert store.in_flight == 0
    assert store.last_outcome is None


def test_append_dictation_joins_transcripts():
    store = make_store(reply_with("x"))

    store.append_dictation("how do I")
    store.append_dictation("   ")
    store.append_dictation(" prevent STIs ")

    assert store.input_buffer == "how do I prevent STIs"
    assert len(store.turns) == 1


def test_turn_ids_are_unique():
    store = make_store(reply_with("x"))
    store.reset()
    other = make_store(reply_with("x"))

    assert store.turns[0].id != other.turns[0].id


@pytest.mark.asyncio
async def test_direct_dispatch_keeps_typing_counter_balanced():
    release_second = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        last = json.loads(request.content)["messages"][-1]["content"]
        if last == "second":
            await release_second.wait()
        return httpx.Response(200, json={"reply": f"re: {last}"})

    store = make_store(handler)

    outcome = await store.dispatch(store.conversation)
    assert outcome is DispatchOutcome.RESOLVED
    assert store.in_flight == 0

    second = asyncio.create_task(store.submit("second"))
    await asyncio.sleep(0)
    assert store.in_flight == 1
    assert store.is_typing

    release_second.set()
    await second
    assert store.in_flight == 0
    assert store.state is SessionState.IDLE


@pytest.mark.asyncio
async def test_dispatch_marks_typing_while_waiting():
    seen = {}

    async def handler(request):
        seen["in_flight"] = store.in_flight
        return httpx.Response(200, json={"reply": "ok"})

    store = make_store(handler)
    await store.dispatch(store.conversation)

    assert seen["in_flight"] == 1
    assert store.in_flight == 0
