"""
dashboard.py — FastAPI dashboard for Daily Log Bot.

Serves a per-user log report page and a JSON API with the same data.
Protected with a simple password query param.
"""

import os
from datetime import datetime
from pathlib import Path

import pytz
import uvicorn
from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from logbot import db
from logbot.messages import format_days, format_log_date
from logbot.models import Outcome
from logbot.recorder import DEFAULT_LOG_COUNT, day_of, load_report, load_timezone

app = FastAPI(title="Daily Log Bot Dashboard")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


def get_tz():
    return load_timezone(os.environ.get("TIMEZONE", "UTC"))


def check_auth(key: str) -> bool:
    """Simple password check. Empty password = no auth required."""
    password = os.environ.get("DASHBOARD_PASSWORD", "")
    if not password:
        return True
    return key == password


def _today():
    return day_of(datetime.now(pytz.UTC), get_tz())


# ─── Routes ──────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/users/{user_id}", response_class=HTMLResponse)
async def user_report(
    request: Request,
    user_id: str,
    limit: int = Query(default=DEFAULT_LOG_COUNT, ge=0),
    key: str = Query(default=""),
):
    if not check_auth(key):
        return HTMLResponse(
            content="<h1>🔒 Access Denied</h1><p>Add <code>?key=YOUR_PASSWORD</code> to the URL.</p>",
            status_code=403,
        )

    result = load_report(user_id, limit, _today(), fetch_history=db.fetch_history)
    if result.outcome == Outcome.STORE_ERROR:
        return HTMLResponse(content="<h1>Database unavailable</h1>", status_code=503)

    report = result.report
    rows = []
    if report:
        rows = [
            {
                "day": report.first_day_number + offset,
                "date": format_log_date(entry.log_date),
                "message": entry.message,
            }
            for offset, entry in enumerate(report.entries)
        ]

    return templates.TemplateResponse(request, "report.html", {
        "user_id": user_id,
        "now": datetime.now(get_tz()).strftime("%Y-%m-%d %H:%M %Z"),
        "rows": rows,
        "total": report.total if report else 0,
        "shown": report.shown if report else 0,
        "streak": format_days(report.streak if report else 0),
    })


@app.get("/api/users/{user_id}/logs")
async def api_user_logs(
    user_id: str,
    limit: int = Query(default=DEFAULT_LOG_COUNT, ge=0),
    key: str = Query(default=""),
):
    """JSON API endpoint for a user's log report."""
    if not check_auth(key):
        return JSONResponse(status_code=403, content={"error": "unauthorized"})

    result = load_report(user_id, limit, _today(), fetch_history=db.fetch_history)
    if result.outcome == Outcome.STORE_ERROR:
        return JSONResponse(status_code=503, content={"error": "database unavailable"})
    if result.outcome == Outcome.EMPTY_HISTORY:
        return {"user_id": user_id, "total": 0, "shown": 0, "streak": 0, "entries": []}

    report = result.report
    return {
        "user_id": user_id,
        "total": report.total,
        "shown": report.shown,
        "streak": report.streak,
        "entries": [
            {
                "day": report.first_day_number + offset,
                "log_date": entry.log_date.isoformat(),
                "message": entry.message,
            }
            for offset, entry in enumerate(report.entries)
        ],
    }


def main():
    load_dotenv(find_dotenv(usecwd=True))
    host = os.environ.get("DASHBOARD_HOST", "0.0.0.0")
    port = int(os.environ.get("DASHBOARD_PORT", "8080"))
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
