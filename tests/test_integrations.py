"""Tests for the n8n webhook forward and the Supabase agent directory."""

import httpx
import pytest
from unittest.mock import patch, AsyncMock

from onboarding_api.services import supabase
from onboarding_api.services.webhook import (
    WebhookForwardError,
    WebhookNotConfigured,
    forward_submission,
)

_RealAsyncClient = httpx.AsyncClient


def mock_client(handler):
    def factory(**kwargs):
        return _RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs)
    return factory


@pytest.mark.asyncio
async def test_forward_requires_url():
    with pytest.raises(WebhookNotConfigured):
        await forward_submission({"token": "t"})


@pytest.mark.asyncio
async def test_forward_posts_json(test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "N8N_WEBHOOK_URL", "https://n8n.example.com/webhook/onboarding")
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["body"] = request.read()
        return httpx.Response(200, json={"ok": True})

    with patch("onboarding_api.services.webhook.httpx.AsyncClient", mock_client(handler)):
        await forward_submission({"token": "t", "name": "Joe"})

    assert seen["method"] == "POST"
    assert b'"token":"t"' in seen["body"].replace(b" ", b"")


@pytest.mark.asyncio
async def test_forward_error_status(test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "N8N_WEBHOOK_URL", "https://n8n.example.com/webhook/onboarding")

    with patch("onboarding_api.services.webhook.httpx.AsyncClient",
               mock_client(lambda request: httpx.Response(502, text="bad gateway"))):
        with pytest.raises(WebhookForwardError):
            await forward_submission({"token": "t"})


@pytest.mark.asyncio
async def test_forward_timeout(test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "N8N_WEBHOOK_URL", "https://n8n.example.com/webhook/onboarding")

    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with patch("onboarding_api.services.webhook.httpx.AsyncClient", mock_client(handler)):
        with pytest.raises(WebhookForwardError):
            await forward_submission({"token": "t"})


@pytest.mark.asyncio
async def test_supabase_requires_credentials():
    with pytest.raises(supabase.SupabaseNotConfigured):
        await supabase.get_agents()


@pytest.mark.asyncio
async def test_get_agent_by_id(test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.setattr(test_settings, "SUPABASE_ANON_KEY", "anon")

    def handler(request):
        assert request.url.path == "/rest/v1/ai_agents"
        assert request.url.params["id"] == "eq.agent-1"
        assert request.headers["apikey"] == "anon"
        assert request.headers["authorization"] == "Bearer anon"
        return httpx.Response(200, json=[{"id": "agent-1", "name": "Sofia", "id_millis": "m-1"}])

    with patch("onboarding_api.services.supabase.httpx.AsyncClient", mock_client(handler)):
        agent = await supabase.get_agent_by_id("agent-1")

    assert agent["id_millis"] == "m-1"


@pytest.mark.asyncio
async def test_get_agent_by_id_not_found(test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.setattr(test_settings, "SUPABASE_ANON_KEY", "anon")

    with patch("onboarding_api.services.supabase.httpx.AsyncClient",
               mock_client(lambda request: httpx.Response(200, json=[]))):
        assert await supabase.get_agent_by_id("missing") is None


@pytest.mark.asyncio
async def test_agents_endpoint(client):
    agents = [{"id": "a1", "name": "Sofia", "description": "Sales", "id_millis": "m-1"}]
    with patch("onboarding_api.services.supabase.get_agents", new_callable=AsyncMock, return_value=agents):
        resp = await client.get("/api/agents")

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "agents": agents}


@pytest.mark.asyncio
async def test_agents_endpoint_without_supabase(client):
    resp = await client.get("/api/agents")
    assert resp.status_code == 500
    data = resp.json()
    assert data["success"] is False
    assert data["message"] == "Error fetching agents"
