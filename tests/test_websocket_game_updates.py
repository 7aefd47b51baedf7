from __future__ import annotations

import fakeredis
from fastapi.testclient import TestClient


def test_ws_game_updates_broadcast(client_and_redis: tuple[TestClient, fakeredis.FakeRedis]) -> None:
    client, _ = client_and_redis

    with client.websocket_connect("/ws/game") as ws:
        res = client.post("/game/players", json={"name": "Alice"})
        assert res.status_code == 200

        msg = ws.receive_json()
        assert msg == {"type": "game_updated", "phase": "setup", "round": 1, "turn_in_round": 0}

        client.post("/game/players", json={"name": "Bob"})
        assert ws.receive_json()["phase"] == "in_progress"

        client.post("/game/next")
        msg = ws.receive_json()
        assert msg["turn_in_round"] == 1
