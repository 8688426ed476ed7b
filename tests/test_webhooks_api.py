"""
Tests for the Polka webhook.
"""

import os
import uuid

import pytest

TEST_POLKA_KEY = os.environ["POLKA_KEY"]


def api_key(key=TEST_POLKA_KEY):
    return {"Authorization": f"ApiKey {key}"}


def upgraded(user_id):
    return {"event": "user.upgraded", "data": {"user_id": str(user_id)}}


class TestPolkaWebhook:
    def test_upgrade(self, client, register, login):
        user = register()
        r = client.post("/api/polka/webhooks", json=upgraded(user["id"]), headers=api_key())
        assert r.status_code == 204
        assert login()["is_chirpy_red"] is True

    def test_upgrade_twice_is_fine(self, client, register):
        user = register()
        for _ in range(2):
            r = client.post("/api/polka/webhooks", json=upgraded(user["id"]), headers=api_key())
            assert r.status_code == 204

    def test_other_events_are_ignored(self, client, register, login):
        user = register()
        payload = {"event": "user.payment_failed", "data": {"user_id": user["id"]}}
        r = client.post("/api/polka/webhooks", json=payload, headers=api_key())
        assert r.status_code == 204
        assert login()["is_chirpy_red"] is False

    def test_unknown_user(self, client):
        r = client.post("/api/polka/webhooks", json=upgraded(uuid.uuid4()), headers=api_key())
        assert r.status_code == 404

    def test_malformed_user_id(self, client):
        payload = {"event": "user.upgraded", "data": {"user_id": "walt"}}
        r = client.post("/api/polka/webhooks", json=payload, headers=api_key())
        assert r.status_code == 400

    @pytest.mark.parametrize("headers", [
        {},
        {"Authorization": "ApiKey wrong-key"},
        {"Authorization": f"Bearer {TEST_POLKA_KEY}"},
        {"Authorization": "ApiKey "},
    ])
    def test_bad_api_key(self, client, register, headers):
        user = register()
        r = client.post("/api/polka/webhooks", json=upgraded(user["id"]), headers=headers)
        assert r.status_code == 401
