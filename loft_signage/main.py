"""Main application entry point for the Loft signage service.

This module defines the FastAPI application, configures logging, owns the
in‑memory display state and its refresh cadences, and serves both a JSON
API and the full‑screen HTML page shown by the kiosk browser. It is
designed to run on small single‑board computers, so the page is embedded
here and needs no frontend build chain.

Endpoints:
  - ``/api/timeline``: rendered timeline geometry for the current state.
  - ``/api/reservations``: the normalised reservations currently held.
  - ``/background``: the configured background image, or the bundled default.
  - ``/healthz``: liveness check returning ``ok``.
  - ``/``: serve the signage page.

Fetch errors never reach the page; they are logged and the timeline is
shown empty until the next data refresh succeeds.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import date, datetime, tzinfo
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from fastapi import FastAPI
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse

from .calendar_client import load_reservations
from .config import settings
from .models import Reservation, TimelineWindow
from .sample import sample_reservations
from .scheduler import DisplayState, RefreshScheduler
from .timeline import render_timeline

logger = logging.getLogger("loft_signage")
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

DEFAULT_BACKGROUND = os.path.join(os.path.dirname(__file__), "static", "default-background.svg")

WINDOW = TimelineWindow(
    start_hour=settings.timeline_start_hour,
    end_hour=settings.timeline_end_hour,
    slot_minutes=settings.slot_minutes,
)


def _display_tz() -> Optional[tzinfo]:
    """Return the configured display timezone, or ``None`` for host local time."""
    if not settings.timezone:
        return None
    return ZoneInfo(settings.timezone)


def _now() -> datetime:
    """Return the current wall-clock time for the display."""
    return datetime.now(_display_tz())


async def _load_for_day(day: date) -> List[Reservation]:
    if settings.demo_mode:
        return sample_reservations(day, settings.room_name)
    return await load_reservations(
        day,
        url=settings.events_url,
        room_name=settings.room_name,
        approval_status=settings.approval_status,
        timeout=settings.fetch_timeout_seconds,
    )


state = DisplayState(clock=_now())
scheduler = RefreshScheduler(
    state,
    _load_for_day,
    now=_now,
    clock_seconds=settings.clock_seconds,
    refresh_seconds=settings.refresh_seconds,
    fetch_timeout=settings.fetch_timeout_seconds,
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    scheduler.start()
    try:
        yield
    finally:
        await scheduler.stop()


app = FastAPI(title="Loft Signage Service", lifespan=lifespan)


@app.get("/api/timeline")
def api_timeline() -> Dict[str, Any]:
    """Return the timeline rendered from the current clock and reservations."""
    timeline = render_timeline(state.reservations, state.clock, WINDOW, _display_tz())
    return timeline.model_dump(mode="json")


@app.get("/api/reservations")
def api_reservations() -> Dict[str, Any]:
    """Return the reservations currently held in memory."""
    updated = state.reservations_updated_at
    return {
        "count": len(state.reservations),
        "items": [r.model_dump(mode="json") for r in state.reservations],
        "updatedAt": updated.isoformat() if updated else None,
    }


@app.get("/background")
def background() -> FileResponse:
    """Serve the background image configured with ``SIGNAGE_BACKGROUND_IMAGE``.

    Falls back to the bundled image when none is set or the file is missing,
    so the image panel is never empty.
    """
    path = settings.background_image
    if path and not os.path.isfile(path):
        logger.warning("Background image %s not found; using the default", path)
        path = ""
    return FileResponse(path or DEFAULT_BACKGROUND)


@app.get("/healthz", response_class=PlainTextResponse)
def healthz() -> str:
    """Health check endpoint for the kiosk watchdog."""
    return "ok"


@app.get("/", response_class=HTMLResponse)
def signage_page() -> HTMLResponse:
    """Serve the single page signage display.

    The page only draws; all positions arrive precomputed from
    ``/api/timeline`` as fractions of the timeline height.
    """
    css_vars = """
    :root {
      --bg: #0b0d12;
      --fg: #f4f6fb;
      --panel-bg: rgba(0,0,0,0.45);
      --line-hour: rgba(255,255,255,0.22);
      --line-half: rgba(255,255,255,0.08);
      --block-bg: rgba(231, 76, 60, 0.80);
      --block-border: rgba(255, 255, 255, 0.35);
      --now: #ffcc33;
      --clock-size: 56px;
      --date-size: 32px;
    }
    """
    html = f"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{settings.room_name}</title>
  <style>
    {{css_vars}}
    html, body {{ height: 100%; }}
    body {{
      margin: 0;
      overflow: hidden;
      font-family: system-ui, -apple-system, Segoe UI, Roboto, Ubuntu, Cantarell, Noto Sans, Arial;
      background: var(--bg);
      color: var(--fg);
      cursor: none;
    }}
    .signage {{ display: flex; flex-direction: column; height: 100vh; }}
    .image-section {{ position: relative; width: 100%; aspect-ratio: 16 / 9; max-height: 60vh; background: #000; }}
    .display-image {{ width: 100%; height: 100%; object-fit: cover; display: block; }}
    .clock, .date {{
      position: absolute; bottom: 18px; padding: 10px 18px; border-radius: 14px;
      background: var(--panel-bg); font-weight: 650;
    }}
    .clock {{ left: 22px; font-size: var(--clock-size); }}
    .date {{ right: 22px; font-size: var(--date-size); }}
    .calendar {{ flex: 1; padding: 24px 22px 28px 22px; }}
    .timeline {{ position: relative; height: 100%; display: flex; }}
    .labels {{ position: relative; width: 70px; }}
    .label {{ position: absolute; right: 10px; transform: translateY(-50%); font-size: 13px; opacity: 0.8; }}
    .grid {{ position: relative; flex: 1; }}
    .line {{ position: absolute; left: 0; right: 0; height: 0; }}
    .line.hour {{ border-top: 1px solid var(--line-hour); }}
    .line.half-hour {{ border-top: 1px dashed var(--line-half); }}
    .block {{
      position: absolute; left: 8px; right: 8px; border-radius: 8px; overflow: hidden;
      background: var(--block-bg); border: 1px solid var(--block-border);
      display: flex; align-items: center; padding: 0 12px; font-weight: 600; box-sizing: border-box;
    }}
    .now {{ position: absolute; left: 0; right: 0; border-top: 2px solid var(--now); z-index: 2; }}
    .now-label {{
      position: absolute; right: 0; transform: translateY(-110%); z-index: 2;
      color: var(--now); font-size: 13px; font-weight: 700;
    }}
  </style>
</head>
<body>
  <div class="signage">
    <div class="image-section">
      <img class="display-image" src="/background" alt="{settings.room_name}"
           onerror="this.style.visibility='hidden'" />
      <div class="clock" id="clock"></div>
      <div class="date" id="date"></div>
    </div>
    <div class="calendar">
      <div class="timeline">
        <div class="labels" id="labels"></div>
        <div class="grid" id="grid"></div>
      </div>
    </div>
  </div>
<script>
const CLOCK_MS = {settings.clock_seconds} * 1000;

function pct(v) {{ return `${{v * 100}}%`; }}
function el(cls, top) {{
  const d = document.createElement("div");
  d.className = cls;
  d.style.top = pct(top);
  return d;
}}
function render(t) {{
  document.getElementById("clock").textContent = t.clock.time;
  document.getElementById("date").textContent = t.clock.date;
  const labels = document.getElementById("labels");
  const grid = document.getElementById("grid");
  labels.innerHTML = "";
  grid.innerHTML = "";
  (t.lines || []).forEach(line => {{
    grid.appendChild(el(`line ${{line.kind}}`, line.position));
    if (line.label) {{
      const l = el("label", line.position);
      l.textContent = line.label;
      labels.appendChild(l);
    }}
  }});
  (t.blocks || []).forEach(b => {{
    const d = el("block", b.top);
    d.style.height = pct(b.height);
    d.textContent = b.label;
    grid.appendChild(d);
  }});
  if (t.now) {{
    grid.appendChild(el("now", t.now.position));
    const l = el("now-label", t.now.position);
    l.textContent = t.now.label;
    grid.appendChild(l);
  }}
}}
async function refresh() {{
  try {{
    const r = await fetch("/api/timeline", {{cache: "no-store"}});
    if (r.ok) render(await r.json());
  }} catch (e) {{
    console.error("Failed to refresh timeline", e);
  }}
}}
refresh();
setInterval(refresh, CLOCK_MS);
</script>
</body>
</html>
"""  # noqa: E501
    return HTMLResponse(content=html.replace("{css_vars}", css_vars))
