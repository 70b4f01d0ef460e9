"""RowStore 包测试 fixtures"""

import json

import httpx
import pytest


class RecordingTransport(httpx.MockTransport):
    """记录所有请求并按预设处理函数返回响应"""

    def __init__(self, handler=None):
        self.requests: list[httpx.Request] = []
        self._handler = handler or (lambda request: httpx.Response(200, json=[]))
        super().__init__(self._record)

    def _record(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def recording_transport():
    """返回一个可替换 handler 的记录型 transport 工厂"""
    return RecordingTransport
