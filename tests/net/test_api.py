"""Tests for REST reply decoding and the Qt API client."""

from __future__ import annotations

from chesslink.core.enums import GameType
from chesslink.net.api import QUEUED_MATCH_ID, ApiReply, QtMatchApi, parse_reply
from chesslink.settings import ClientSettings


class TestParseReply:
    def test_json_object(self) -> None:
        reply = parse_reply(200, b'{"matchId": 12}')
        assert reply.ok
        assert reply.match_id == 12

    def test_queued(self) -> None:
        reply = parse_reply(200, b'{"matchId": -1}')
        assert reply.match_id == QUEUED_MATCH_ID

    def test_empty_body_is_an_ack(self) -> None:
        reply = parse_reply(200, b"")
        assert reply.ok
        assert reply.payload == {}
        assert reply.match_id is None

    def test_http_error_status(self) -> None:
        reply = parse_reply(500, b'{"matchId": 3}')
        assert not reply.ok
        assert reply.status == 500

    def test_network_error(self) -> None:
        reply = parse_reply(None, b"", "Connection refused")
        assert not reply.ok
        assert reply.error == "Connection refused"

    def test_invalid_json(self) -> None:
        assert not parse_reply(200, b"<html>").ok

    def test_non_object_json(self) -> None:
        assert not parse_reply(200, b"[1, 2]").ok


class TestApiReplyMatchId:
    def test_numeric_string(self) -> None:
        assert ApiReply(ok=True, payload={"matchId": "5"}).match_id == 5

    def test_garbage_is_none(self) -> None:
        assert ApiReply(ok=True, payload={"matchId": "x"}).match_id is None
        assert ApiReply(ok=True, payload={"matchId": True}).match_id is None
        assert ApiReply(ok=True, payload={"matchId": None}).match_id is None


class TestQtMatchApi:
    def test_requests_target_configured_server(self) -> None:
        api = QtMatchApi(ClientSettings(server_url="http://example.test:9000/"))
        request = api._request("/game/check-match")
        assert request.url().toString() == "http://example.test:9000/game/check-match"

    def test_unreachable_server_reports_failure(self, qapp: object) -> None:
        from PyQt6.QtCore import QEventLoop, QTimer

        # Port 9 on localhost is expected to refuse connections.
        api = QtMatchApi(
            ClientSettings(server_url="http://127.0.0.1:9", request_timeout_ms=2000)
        )
        replies: list[ApiReply] = []
        loop = QEventLoop()

        def on_reply(reply: ApiReply) -> None:
            replies.append(reply)
            loop.quit()

        api.create_match(GameType.BLITZ, on_reply)
        QTimer.singleShot(5000, loop.quit)
        loop.exec()

        assert len(replies) == 1
        assert not replies[0].ok
        assert api.pending_count == 0
