"""Mock RevenueCat developer API backed by JSON stubs

Run with: uvicorn mock_api.revenuecat_server.main:app --port 8001
"""

import json
import os
import secrets
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

app = FastAPI(title="Mock RevenueCat Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/revenuecat_stub") if os.path.exists("/revenuecat_stub") else Path(__file__).resolve().parents[1] / "revenuecat_stub"

PUBLIC = "/v1/developers"
INTERNAL = "/internal/v1/developers"

ACCOUNT_EMAIL = "dev@example.com"
ACCOUNT_PASSWORD = "password"

TOKENS: set[str] = set()
WEBHOOKS: Dict[str, Dict[str, Dict[str, Any]]] = {}


def reset_state() -> None:
    TOKENS.clear()
    WEBHOOKS.clear()


def load_stub(name: str) -> Any:
    file = DATA_DIR / f"{name}.json"
    if not file.exists():
        raise HTTPException(status_code=404, detail=f"{name} not found")
    return json.loads(file.read_text())


@app.exception_handler(StarletteHTTPException)
async def error_envelope(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"code": exc.status_code, "message": str(exc.detail)})


def require_xhr(x_requested_with: Optional[str] = Header(default=None)) -> None:
    if x_requested_with != "XMLHttpRequest":
        raise HTTPException(status_code=403, detail="missing X-Requested-With")


def require_token(authorization: Optional[str] = Header(default=None)) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme != "Bearer" or token not in TOKENS:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return token


def require_json_content_type(content_type: Optional[str] = Header(default=None)) -> None:
    if content_type != "application/json":
        raise HTTPException(status_code=415, detail="Content-Type must be application/json")


def require_sandbox_off(sandbox_mode: Optional[str] = None) -> None:
    if sandbox_mode != "false":
        raise HTTPException(status_code=400, detail="sandbox_mode is required")


@app.get("/health")
def health(): return {"status": "ok"}


# Auth


@app.post(f"{PUBLIC}/login", dependencies=[Depends(require_xhr)])
def login(body: Dict[str, Any]):
    if body.get("email") != ACCOUNT_EMAIL or body.get("password") != ACCOUNT_PASSWORD:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    token = secrets.token_hex(16)
    TOKENS.add(token)
    return {"authentication_token": token, "authentication_token_expiration": "2030-01-01T00:00:00Z"}


@app.post(f"{PUBLIC}/logout", dependencies=[Depends(require_xhr), Depends(require_json_content_type)])
def logout(token: str = Depends(require_token)):
    TOKENS.discard(token)
    return Response(status_code=204)


@app.get(f"{PUBLIC}/me", dependencies=[Depends(require_xhr), Depends(require_token)])
def me():
    return load_stub("me")


# Projects


@app.get(f"{INTERNAL}/me/projects", dependencies=[Depends(require_xhr), Depends(require_token)])
def projects():
    return load_stub("projects")


@app.get(f"{INTERNAL}/me/projects/{{project_id}}", dependencies=[Depends(require_xhr), Depends(require_token)])
def project_detail(project_id: str):
    for project in load_stub("projects"):
        if project["id"] == project_id:
            return project
    raise HTTPException(status_code=404, detail="project not found")


# Overview & charts


@app.get(f"{PUBLIC}/me/overview", dependencies=[Depends(require_xhr), Depends(require_token), Depends(require_sandbox_off)])
def overview():
    return load_stub("overview")


@app.get(f"{PUBLIC}/me/charts_v2/{{name}}", dependencies=[Depends(require_xhr), Depends(require_token)])
def chart(name: str, resolution: str, start_date: date, end_date: date):
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")
    data = load_stub(f"chart_{name}")
    data["resolution"] = resolution
    return data


# Transactions


@app.get(f"{PUBLIC}/me/transactions", dependencies=[Depends(require_xhr), Depends(require_token)])
def transactions(limit: int = 50, start_from: Optional[str] = None):
    data = load_stub("transactions")
    data["transactions"] = data["transactions"][:limit]
    return data


@app.get(
    f"{PUBLIC}/me/apps/{{project_id}}/subscribers/{{subscriber_id}}",
    dependencies=[Depends(require_xhr), Depends(require_token), Depends(require_sandbox_off)],
)
def subscriber(project_id: str, subscriber_id: str):
    data = load_stub("subscriber")
    data["subscriber"]["app_user_id"] = subscriber_id
    return data


@app.get(
    f"{INTERNAL}/me/apps/{{project_id}}/subscribers/{{subscriber_id}}/activity",
    dependencies=[Depends(require_xhr), Depends(require_token), Depends(require_sandbox_off)],
)
def subscriber_activity(project_id: str, subscriber_id: str):
    data = load_stub("activity")
    data["subscriber"]["app_user_id"] = subscriber_id
    return data


# Webhooks


def _webhook_or_404(project_id: str, webhook_id: str) -> Dict[str, Any]:
    webhook = WEBHOOKS.get(project_id, {}).get(webhook_id)
    if webhook is None:
        raise HTTPException(status_code=404, detail="webhook not found")
    return webhook


@app.get(f"{INTERNAL}/me/projects/{{project_id}}/integrations/webhooks", dependencies=[Depends(require_xhr), Depends(require_token)])
def list_webhooks(project_id: str):
    return list(WEBHOOKS.get(project_id, {}).values())


@app.post(f"{INTERNAL}/me/projects/{{project_id}}/integrations/webhooks", dependencies=[Depends(require_xhr), Depends(require_token)])
def create_webhook(project_id: str, body: Dict[str, Any]):
    if not body.get("name") or not body.get("url"):
        raise HTTPException(status_code=422, detail="name and url are required")
    webhook_id = f"wh_{secrets.token_hex(4)}"
    webhook = {"id": webhook_id, "created_at": "2024-02-01T00:00:00Z", **body}
    WEBHOOKS.setdefault(project_id, {})[webhook_id] = webhook
    return webhook


@app.put(
    f"{INTERNAL}/me/projects/{{project_id}}/integrations/webhooks/{{webhook_id}}",
    dependencies=[Depends(require_xhr), Depends(require_token)],
)
def update_webhook(project_id: str, webhook_id: str, body: Dict[str, Any]):
    webhook = _webhook_or_404(project_id, webhook_id)
    webhook.update(body)
    return webhook


@app.delete(
    f"{INTERNAL}/me/projects/{{project_id}}/integrations/webhooks/{{webhook_id}}",
    dependencies=[Depends(require_xhr), Depends(require_token), Depends(require_json_content_type)],
)
def delete_webhook(project_id: str, webhook_id: str):
    _webhook_or_404(project_id, webhook_id)
    del WEBHOOKS[project_id][webhook_id]
    return Response(status_code=204)


@app.post(
    f"{INTERNAL}/me/projects/{{project_id}}/integrations/webhooks/{{webhook_id}}/test_webhook",
    dependencies=[Depends(require_xhr), Depends(require_token), Depends(require_json_content_type)],
)
def test_webhook(project_id: str, webhook_id: str):
    _webhook_or_404(project_id, webhook_id)
    return Response(status_code=204)
