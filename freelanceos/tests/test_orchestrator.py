import unittest
from unittest.mock import MagicMock

import requests

from freelanceos.config import Settings
from freelanceos.dependencies import build_reset_client
from freelanceos.orchestrator import AuthStrategy, ResetTrigger, run_trigger
from freelanceos.reset_client import HttpResetFunctionClient, ResetFunctionResponse
from freelanceos.types import ResetActor


def _settings(**overrides):
    values = {
        "supabase_url": "https://store.test",
        "supabase_service_role_key": "service-key",
        "admin_api_key": "admin-key",
        "cron_secret": "cron-secret",
        "reset_enabled": True,
    }
    values.update(overrides)
    return Settings(**values)


def _client(status_code=200, body=None, side_effect=None):
    client = MagicMock()
    client.endpoint = "https://store.test/functions/v1/database-reset"
    if side_effect:
        client.invoke.side_effect = side_effect
    else:
        client.invoke.return_value = ResetFunctionResponse(
            status_code,
            body
            if body is not None
            else {
                "success": True,
                "duration": 12,
                "recordsAffected": {"projects": 6, "notes": 15, "bills": 9},
            },
        )
    return client


class RunTriggerTests(unittest.TestCase):
    def test_disabled_reset_is_skipped_for_every_entry_point(self):
        settings = _settings(reset_enabled=False)
        triggers = [
            ResetTrigger(ResetActor.MANUAL, AuthStrategy.ADMIN_KEY, "admin-key"),
            ResetTrigger(
                ResetActor.SCHEDULED, AuthStrategy.CRON_SECRET, "Bearer cron-secret"
            ),
            ResetTrigger(ResetActor.API, AuthStrategy.NONE),
        ]
        for trigger in triggers:
            client = _client()
            status_code, body = run_trigger(trigger, settings, client)
            self.assertEqual(status_code, 200)
            self.assertTrue(body["skipped"])
            client.invoke.assert_not_called()

    def test_force_overrides_disabled_flag(self):
        client = _client()
        trigger = ResetTrigger(
            ResetActor.MANUAL, AuthStrategy.ADMIN_KEY, "admin-key", force=True
        )
        status_code, body = run_trigger(
            trigger, _settings(reset_enabled=False), client
        )
        self.assertEqual(status_code, 200)
        self.assertEqual(body["recordsAffected"]["projects"], 6)
        self.assertEqual(body["resetDuration"], 12)
        client.invoke.assert_called_once_with({"triggeredBy": "manual", "force": True})

    def test_dry_run_returns_payload_without_calling(self):
        client = _client()
        trigger = ResetTrigger(
            ResetActor.MANUAL, AuthStrategy.ADMIN_KEY, "admin-key", dry_run=True
        )
        status_code, body = run_trigger(trigger, _settings(), client)
        self.assertEqual(status_code, 200)
        self.assertEqual(
            body["wouldReset"],
            {
                "endpoint": "https://store.test/functions/v1/database-reset",
                "payload": {"triggeredBy": "manual", "force": False},
            },
        )
        client.invoke.assert_not_called()

    def test_admin_key_optional_when_not_configured(self):
        client = _client()
        trigger = ResetTrigger(ResetActor.MANUAL, AuthStrategy.ADMIN_KEY, None)
        status_code, _ = run_trigger(trigger, _settings(admin_api_key=None), client)
        self.assertEqual(status_code, 200)

    def test_cron_without_secret_configured_is_open(self):
        client = _client()
        trigger = ResetTrigger(ResetActor.SCHEDULED, AuthStrategy.CRON_SECRET, None)
        status_code, _ = run_trigger(trigger, _settings(cron_secret=None), client)
        self.assertEqual(status_code, 200)

    def test_bad_credentials_make_no_calls(self):
        client = _client()
        for trigger in (
            ResetTrigger(ResetActor.MANUAL, AuthStrategy.ADMIN_KEY, "wrong"),
            ResetTrigger(ResetActor.SCHEDULED, AuthStrategy.CRON_SECRET, "cron-secret"),
            ResetTrigger(ResetActor.SCHEDULED, AuthStrategy.CRON_SECRET, None),
        ):
            status_code, body = run_trigger(trigger, _settings(), client)
            self.assertEqual(status_code, 401)
            self.assertIn("timestamp", body)
        client.invoke.assert_not_called()

    def test_missing_configuration_is_a_failure(self):
        trigger = ResetTrigger(ResetActor.API, AuthStrategy.NONE, force=True)
        status_code, body = run_trigger(trigger, _settings(supabase_url=None), _client())
        self.assertEqual(status_code, 500)
        self.assertIn("SUPABASE_URL", body["error"])

        status_code, body = run_trigger(
            trigger, _settings(supabase_service_role_key=None), None
        )
        self.assertEqual(status_code, 500)
        self.assertIn("SUPABASE_SERVICE_ROLE_KEY", body["error"])

    def test_success_false_body_is_a_failure(self):
        client = _client(body={"success": False, "error": "Demo user not found"})
        trigger = ResetTrigger(ResetActor.API, AuthStrategy.NONE)
        status_code, body = run_trigger(trigger, _settings(), client)
        self.assertEqual(status_code, 500)
        self.assertEqual(body["error"], "Demo user not found")
        self.assertFalse(body["success"])

    def test_http_error_status_preserves_remote_error(self):
        client = _client(403, {"success": False, "error": "Database reset is disabled"})
        trigger = ResetTrigger(ResetActor.API, AuthStrategy.NONE)
        status_code, body = run_trigger(trigger, _settings(), client)
        self.assertEqual(status_code, 500)
        self.assertEqual(
            body["error"], "Reset API returned 403: Database reset is disabled"
        )

    def test_transport_errors_are_caught(self):
        client = _client(side_effect=requests.ConnectionError("connection refused"))
        trigger = ResetTrigger(ResetActor.API, AuthStrategy.NONE)
        status_code, body = run_trigger(trigger, _settings(), client)
        self.assertEqual(status_code, 500)
        self.assertIn("connection refused", body["message"])
        self.assertGreaterEqual(body["duration"], 0)


class HttpResetFunctionClientTests(unittest.TestCase):
    def _session(self, status_code, json_value=None, json_error=None):
        response = MagicMock()
        response.status_code = status_code
        if json_error:
            response.json.side_effect = json_error
        else:
            response.json.return_value = json_value
        session = MagicMock()
        session.post.return_value = response
        return session

    def test_invoke_sends_bearer_credential(self):
        session = self._session(200, {"success": True})
        client = HttpResetFunctionClient(
            "https://store.test/functions/v1/database-reset",
            "service-key",
            timeout=5,
            session=session,
        )
        response = client.invoke({"triggeredBy": "manual", "force": False})
        self.assertTrue(response.ok)
        _, kwargs = session.post.call_args
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer service-key")
        self.assertEqual(kwargs["json"], {"triggeredBy": "manual", "force": False})
        self.assertEqual(kwargs["timeout"], 5)

    def test_non_json_body_becomes_empty(self):
        session = self._session(404, json_error=ValueError("no json"))
        client = HttpResetFunctionClient("https://x.test/reset", "k", session=session)
        response = client.invoke({})
        self.assertFalse(response.ok)
        self.assertEqual(response.body, {})

    def test_built_clients_share_one_session(self):
        settings = _settings()
        first = build_reset_client(settings)
        second = build_reset_client(settings)
        self.assertIsNot(first, second)
        self.assertIs(first.session, second.session)
        self.assertEqual(
            first.endpoint, "https://store.test/functions/v1/database-reset"
        )
        self.assertIsNone(build_reset_client(_settings(supabase_url=None)))

    def test_probe_is_a_dry_run(self):
        session = self._session(403, {"success": False})
        client = HttpResetFunctionClient(
            "https://x.test/reset", "k", probe_timeout=2, session=session
        )
        self.assertEqual(client.probe().status_code, 403)
        _, kwargs = session.post.call_args
        self.assertTrue(kwargs["json"]["dryRun"])
        self.assertEqual(kwargs["timeout"], 2)


if __name__ == "__main__":
    unittest.main()
