from __future__ import annotations

import asyncio

from openai_rest.base.streaming import DONE, SSEEvent, aiter_sse_payloads, decode_sse_line, iter_sse_payloads


def test_decode_sse_line_variants():
    assert decode_sse_line('data: {"a": 1}') == SSEEvent(data='{"a": 1}')
    assert decode_sse_line(b'data:{"a": 1}\r\n') == SSEEvent(data='{"a": 1}')
    assert decode_sse_line("data: [DONE]") is DONE
    assert decode_sse_line("") is None
    assert decode_sse_line(None) is None
    assert decode_sse_line(": keep-alive") is None
    assert decode_sse_line("event: message") is None
    assert decode_sse_line("data:   ") is None


def test_iter_sse_payloads_skips_bad_events(log_capture):
    lines = ['data: {"a": 1}', "", "data: {broken", "data: 3", 'data: {"b": 2}', "data: [DONE]", 'data: {"c": 3}']
    assert list(iter_sse_payloads(lines)) == [{"a": 1}, {"b": 2}]
    errors = [e for e in log_capture.events() if e["event"] == "stream.decode_error"]
    assert [e["data"] for e in errors] == ["{broken", "3"]


def test_iter_sse_payloads_without_done_ends_with_input():
    assert list(iter_sse_payloads(['data: {"a": 1}'])) == [{"a": 1}]


def test_aiter_sse_payloads():
    async def lines():
        for line in ['data: {"a": 1}', "data: [DONE]"]:
            yield line

    async def collect():
        return [p async for p in aiter_sse_payloads(lines())]

    assert asyncio.run(collect()) == [{"a": 1}]
