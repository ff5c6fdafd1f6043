from __future__ import annotations

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from dummyserver.socketserver import ReceivedRequest, make_response
from dummyserver.testcase import SocketDummyServerTestCase
from gfetch import AbortController, AbortError, AbortSignal, web
from test import LONG_TIMEOUT, SHORT_TIMEOUT


class TestWebDispatch(SocketDummyServerTestCase):
    @pytest.mark.asyncio
    async def test_json_body(self) -> None:
        self.start_basic_handler()

        response = await web.patch(self.base_url, json=[1, "a"], headers={"X-A": "1"})

        assert response.status == 200
        received = self.received[0]
        assert received.method == "PATCH"
        assert received.body == b'[1,"a"]'
        assert received.headers["content-type"] == "application/json"
        assert received.headers["x-a"] == "1"

    @pytest.mark.asyncio
    async def test_head_sends_no_body(self) -> None:
        self.start_basic_handler()

        await web.head(self.base_url, json={"n": 1})

        assert self.received[0].method == "HEAD"
        assert self.received[0].body == b""

    @pytest.mark.asyncio
    async def test_follows_redirects(self) -> None:
        def responder(request: ReceivedRequest) -> bytes:
            if request.target == "/old":
                return make_response("301 Moved Permanently", headers=[("Location", "/new")])
            return make_response(body=request.target.encode())

        self.start_responder(responder, num=2)

        response = await web.get(f"{self.base_url}/old")

        assert response.data == b"/new"

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        release = threading.Event()
        self.start_silent_handler(release)

        try:
            with pytest.raises(AbortError) as e:
                await web.get(self.base_url, timeout=SHORT_TIMEOUT)
            assert isinstance(e.value.reason, TimeoutError)
        finally:
            release.set()

    @pytest.mark.asyncio
    async def test_aborted_before_sending(self) -> None:
        self.start_basic_handler()
        controller = AbortController()

        request = web.get(self.base_url, signal=controller.signal)
        controller.abort("stop")
        with pytest.raises(AbortError) as e:
            await request
        assert e.value.reason == "stop"

        await web.get(self.base_url)
        assert len(self.received) == 1

    @pytest.mark.asyncio
    async def test_abort_signal_in_flight(self) -> None:
        release = threading.Event()
        self.start_silent_handler(release)
        controller = AbortController()
        asyncio.get_running_loop().call_later(SHORT_TIMEOUT, controller.abort)

        try:
            with pytest.raises(AbortError) as e:
                await web.post(self.base_url, body=b"x", signal=controller.signal)
            assert e.value.reason is None
        finally:
            release.set()

    @pytest.mark.asyncio
    async def test_timeout_signal_frees_worker(self) -> None:
        loop = asyncio.get_running_loop()
        loop.set_default_executor(ThreadPoolExecutor(max_workers=1))
        release = threading.Event()
        self.start_silent_handler(release)

        try:
            with pytest.raises(AbortError) as e:
                await web.get(self.base_url, signal=AbortSignal.timeout(SHORT_TIMEOUT))
            assert isinstance(e.value.reason, TimeoutError)
            await asyncio.wait_for(loop.run_in_executor(None, threading.get_ident), LONG_TIMEOUT * 5)
        finally:
            release.set()
