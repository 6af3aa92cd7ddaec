import asyncio
import json
import unittest
from unittest.mock import Mock, patch

import requests

from pinger.config import settings
from pinger.main import app


def _asgi_get(path: str) -> tuple[int, dict]:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": b"",
        "headers": [(b"host", b"testserver")],
        "client": ("127.0.0.1", 12345),
        "server": ("testserver", 80),
    }
    sent_messages: list[dict] = []
    received = False

    async def receive():
        nonlocal received
        if received:
            return {"type": "http.disconnect"}
        received = True
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message):
        sent_messages.append(message)

    asyncio.run(app(scope, receive, send))
    status = 500
    body = b""
    for message in sent_messages:
        if message["type"] == "http.response.start":
            status = message["status"]
        if message["type"] == "http.response.body":
            body += message.get("body", b"")
    return status, json.loads(body.decode("utf-8"))


class CheckEndpointTests(unittest.TestCase):
    def test_missing_target_returns_500(self) -> None:
        with patch.object(settings, "TARGET_ENDPOINT", None), self.assertLogs(
            "pinger.checks.ping_check", level="ERROR"
        ):
            status, payload = _asgi_get("/check")

        self.assertEqual(status, 500)
        self.assertEqual(
            payload, {"success": False, "message": "TARGET_ENDPOINT not defined"}
        )

    def test_successful_ping_returns_200_with_data(self) -> None:
        response = Mock(status_code=200)
        response.json.return_value = {"ok": True}
        with patch.object(settings, "TARGET_ENDPOINT", "http://target.local/"), patch(
            "pinger.clients.target_client.requests.get", return_value=response
        ):
            status, payload = _asgi_get("/check")

        self.assertEqual(status, 200)
        self.assertEqual(
            payload,
            {"success": True, "message": "Ping successful", "data": {"ok": True}},
        )

    def test_failed_ping_returns_500_with_error(self) -> None:
        with patch.object(settings, "TARGET_ENDPOINT", "http://target.local/"), patch(
            "pinger.clients.target_client.requests.get",
            side_effect=requests.ConnectionError("refused"),
        ), self.assertLogs("pinger.checks.ping_check", level="WARNING"):
            status, payload = _asgi_get("/check")

        self.assertEqual(status, 500)
        self.assertFalse(payload["success"])
        self.assertEqual(payload["message"], "Ping failed")
        self.assertIn("refused", payload["error"])
        self.assertNotIn("data", payload)

    def test_health(self) -> None:
        status, payload = _asgi_get("/health")

        self.assertEqual(status, 200)
        self.assertEqual(payload, {"status": "ok"})

    def test_config_does_not_expose_target_url(self) -> None:
        with patch.object(settings, "TARGET_ENDPOINT", "http://secret.local/"):
            status, payload = _asgi_get("/config")

        self.assertEqual(status, 200)
        self.assertTrue(payload["target_configured"])
        self.assertNotIn("secret.local", json.dumps(payload))

    def test_nan_from_target_returns_structured_500(self) -> None:
        response = Mock(status_code=200, text='{"v": NaN}')
        response.json.side_effect = lambda **kwargs: json.loads(response.text, **kwargs)
        with patch.object(settings, "TARGET_ENDPOINT", "http://target.local/"), patch(
            "pinger.clients.target_client.requests.get", return_value=response
        ), self.assertLogs("pinger.checks.ping_check", level="WARNING"):
            status, payload = _asgi_get("/check")

        self.assertEqual(status, 500)
        self.assertFalse(payload["success"])
        self.assertEqual(payload["message"], "Ping failed")
        self.assertIn("NaN", payload["error"])

    def test_null_from_target_serializes_data_null(self) -> None:
        response = Mock(status_code=200, text="null")
        response.json.side_effect = lambda **kwargs: json.loads(response.text, **kwargs)
        with patch.object(settings, "TARGET_ENDPOINT", "http://target.local/"), patch(
            "pinger.clients.target_client.requests.get", return_value=response
        ):
            status, payload = _asgi_get("/check")

        self.assertEqual(status, 200)
        self.assertEqual(
            payload, {"success": True, "message": "Ping successful", "data": None}
        )


class OpenAPITests(unittest.TestCase):
    def test_openapi_schema_generation(self) -> None:
        schema = app.openapi()

        self.assertIn("paths", schema)
        self.assertIn("/check", schema["paths"])
        self.assertIn("/health", schema["paths"])
        self.assertIn("/config", schema["paths"])


if __name__ == "__main__":
    unittest.main()
