"""End-to-end websocket protocol through the FastAPI app."""

import pytest
from starlette.websockets import WebSocketDisconnect


def send(ws, event, data=None):
    message = {"event": event}
    if data is not None:
        message["data"] = data
    ws.send_json(message)


def register(ws, name):
    send(ws, "register", name)
    reply = ws.receive_json()
    assert reply == {"event": "registered", "data": {"success": True, "name": name.strip()}}
    return ws.receive_json()  # guestCount broadcast


def test_register_replies_and_broadcasts_guest_count(client):
    with client.websocket_connect("/ws") as host, client.websocket_connect("/ws") as alice:
        send(alice, "register", "  Alice ")

        assert alice.receive_json() == {
            "event": "registered",
            "data": {"success": True, "name": "Alice"},
        }
        assert alice.receive_json() == {"event": "guestCount", "data": 1}
        assert host.receive_json() == {"event": "guestCount", "data": 1}


def test_blank_name_rejected_without_broadcast(client, game):
    with client.websocket_connect("/ws") as alice:
        send(alice, "register", "   ")

        assert alice.receive_json() == {
            "event": "registered",
            "data": {"success": False, "message": "名稱不可為空白"},
        }
        assert game.guest_count() == 0


def test_duplicate_name_rejected(client):
    with client.websocket_connect("/ws") as alice, client.websocket_connect("/ws") as impostor:
        register(alice, "Alice")
        impostor.receive_json()  # guestCount from Alice

        send(impostor, "register", "Alice")

        assert impostor.receive_json() == {
            "event": "registered",
            "data": {"success": False, "message": "這個名稱已經有人使用"},
        }


def test_buzz_before_start_is_not_active(client, game):
    with client.websocket_connect("/ws") as alice:
        register(alice, "Alice")

        send(alice, "buzz")

        assert alice.receive_json() == {
            "event": "buzzResult",
            "data": {"success": False, "message": "請等待主持人開始"},
        }
        assert game.records() == ()


def test_buzz_without_registration(client):
    with client.websocket_connect("/ws") as anonymous:
        send(anonymous, "buzz")

        assert anonymous.receive_json() == {
            "event": "buzzResult",
            "data": {"success": False, "message": "請先登記名稱"},
        }


def test_full_round(client, clock):
    with client.websocket_connect("/ws") as host, \
            client.websocket_connect("/ws") as alice, \
            client.websocket_connect("/ws") as bob:
        register(alice, "Alice")
        bob.receive_json()
        register(bob, "Bob")
        host.receive_json()
        host.receive_json()
        alice.receive_json()

        send(host, "startRound")
        for ws in (host, alice, bob):
            assert ws.receive_json() == {"event": "buzzUpdate", "data": []}
            assert ws.receive_json() == {"event": "roundStarted", "data": None}

        clock.advance(50)
        send(alice, "buzz")
        assert alice.receive_json() == {"event": "buzzResult", "data": {"success": True, "position": 1}}
        first_update = [{"name": "Alice", "time": 50, "timestamp": clock.now}]
        for ws in (host, alice, bob):
            assert ws.receive_json() == {"event": "buzzUpdate", "data": first_update}

        clock.advance(30)
        send(bob, "buzz")
        assert bob.receive_json() == {"event": "buzzResult", "data": {"success": True, "position": 2}}
        update = host.receive_json()
        assert [r["name"] for r in update["data"]] == ["Alice", "Bob"]
        assert [r["time"] for r in update["data"]] == [50, 80]
        alice.receive_json()
        bob.receive_json()

        send(alice, "buzz")
        assert alice.receive_json() == {
            "event": "buzzResult",
            "data": {"success": False, "message": "你已經搶答過了"},
        }

        send(host, "clearRecords")
        for ws in (host, alice, bob):
            assert ws.receive_json() == {"event": "buzzUpdate", "data": []}
            assert ws.receive_json() == {"event": "recordsCleared", "data": None}

        send(host, "getState")
        assert host.receive_json() == {"event": "buzzUpdate", "data": []}
        assert host.receive_json() == {"event": "guestCount", "data": 2}
        assert host.receive_json() == {"event": "roundState", "data": False}

        send(bob, "buzz")
        assert bob.receive_json() == {
            "event": "buzzResult",
            "data": {"success": False, "message": "請等待主持人開始"},
        }


def test_get_state_is_unicast(client, game, clock):
    with client.websocket_connect("/ws") as host, client.websocket_connect("/ws") as alice:
        register(alice, "Alice")
        host.receive_json()
        send(host, "startRound")
        for ws in (host, alice):
            ws.receive_json()
            ws.receive_json()
        clock.advance(12)
        send(alice, "buzz")
        alice.receive_json()
        alice.receive_json()
        host.receive_json()

        send(alice, "getState")

        assert alice.receive_json() == {
            "event": "buzzUpdate",
            "data": [{"name": "Alice", "time": 12, "timestamp": clock.now}],
        }
        assert alice.receive_json() == {"event": "guestCount", "data": 1}
        assert alice.receive_json() == {"event": "roundState", "data": True}


def test_disconnect_releases_name_and_broadcasts(client, game):
    with client.websocket_connect("/ws") as host:
        with client.websocket_connect("/ws") as alice:
            register(alice, "Alice")
            assert host.receive_json() == {"event": "guestCount", "data": 1}
            alice.close()
            assert host.receive_json() == {"event": "guestCount", "data": 0}

        assert game.guest_count() == 0

        with client.websocket_connect("/ws") as returning:
            assert register(returning, "Alice") == {"event": "guestCount", "data": 1}


def test_malformed_messages_keep_connection_open(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_text("not json")
        assert ws.receive_json() == {"event": "error", "data": {"message": "無法辨識的訊息"}}

        send(ws, "selfDestruct")
        assert ws.receive_json() == {"event": "error", "data": {"message": "無法辨識的訊息"}}

        assert register(ws, "Alice") == {"event": "guestCount", "data": 1}


def test_handler_failure_closes_connection_and_releases_name(client, game, monkeypatch):
    def broken_submit(session):
        raise RuntimeError("ledger exploded")

    with client.websocket_connect("/ws") as host, client.websocket_connect("/ws") as alice:
        register(alice, "Alice")
        assert host.receive_json() == {"event": "guestCount", "data": 1}
        monkeypatch.setattr(game, "submit_buzz", broken_submit)

        send(alice, "buzz")

        with pytest.raises(WebSocketDisconnect) as exc_info:
            alice.receive_json()
        assert exc_info.value.code == 1011
        assert host.receive_json() == {"event": "guestCount", "data": 0}
        assert game.guest_count() == 0
