"""
Integration tests for POST /api/analyze-code.
"""

import pytest


class TestAnalyzeCode:
    """Test the code analysis endpoint with a stubbed provider."""

    @pytest.mark.parametrize("body", [{}, {"code": ""}, {"code": "   "}, {"code": None}])
    def test_missing_code(self, alice, analyzer, body):
        response = alice.post("/api/analyze-code", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Code is required"
        assert analyzer.calls == []

    def test_valid_analysis(self, alice, analyzer):
        response = alice.post("/api/analyze-code", json={"code": "reply('pong')"})
        assert response.status_code == 200
        assert response.json() == {
            "suggestions": ["Use an embed for the reply"],
            "security": ["Do not echo user input unescaped"],
            "performance": [],
        }
        assert analyzer.calls == ["reply('pong')"]

    def test_malformed_provider_json(self, alice, analyzer):
        analyzer.content = "{not valid json"
        response = alice.post("/api/analyze-code", json={"code": "reply('pong')"})
        assert response.status_code == 500
        assert response.json()["detail"].startswith("Failed to analyze code")

    def test_provider_failure_message_exposed(self, alice, analyzer):
        analyzer.error = "Failed to analyze code: Request timed out."
        response = alice.post("/api/analyze-code", json={"code": "x = 1"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to analyze code: Request timed out."

    def test_requires_login(self, client):
        assert client.post("/api/analyze-code", json={"code": "x"}).status_code == 401
