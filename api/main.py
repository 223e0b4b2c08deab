from __future__ import annotations

from dataclasses import asdict
import logging
import math

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from fastapi.encoders import jsonable_encoder

from api.schemas import DashboardFiltersModel, PriorityRequest, PriorityResponse, SyncResponse
from core.advisor import GeminiPriorityAdvisor, PriorityAdvisor
from core.data import SheetSync, load_dashboard_data, prepare_context
from core.filters import DashboardFilters, normalize_filters
from core.metrics_dashboard import compute_dashboard
from core.metrics_database import compute_database
from core.records import RECORD_COLUMNS, records_to_frame


app = FastAPI(title="MedFix IPSRS Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

sheet_sync = SheetSync()
priority_advisor: PriorityAdvisor = GeminiPriorityAdvisor()


def _filters_from_model(model: DashboardFiltersModel) -> DashboardFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with NaN/inf floats mapped to null."""

    def _safe_float(value: float) -> float | None:
        if math.isnan(value) or math.isinf(value):
            return None
        return value

    return JSONResponse(content=jsonable_encoder(data, custom_encoder={float: _safe_float}))


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/records")
def records(q: str = Query(default="")):
    try:
        data_ctx = load_dashboard_data(sheet_sync)
        ctx = prepare_context({"query": q}, data_ctx)
        rows = [asdict(r) for r in ctx["filtered_records"]]
        return _json({"count": len(rows), "records": rows})
    except Exception as exc:
        logger.exception("records failed")
        return _error(exc)


@app.post("/dashboard")
def dashboard(filters: DashboardFiltersModel):
    try:
        data_ctx = load_dashboard_data(sheet_sync)
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx)
        return _json(compute_dashboard(f, ctx))
    except Exception as exc:
        logger.exception("dashboard failed")
        return _error(exc)


@app.post("/database")
def database(filters: DashboardFiltersModel):
    try:
        data_ctx = load_dashboard_data(sheet_sync)
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx)
        return _json(compute_database(f, ctx))
    except Exception as exc:
        logger.exception("database failed")
        return _error(exc)


@app.post("/sync", response_model=SyncResponse)
def sync():
    try:
        ok = sheet_sync.sync()
        return SyncResponse(
            ok=ok,
            record_count=len(sheet_sync.records),
            last_sync=sheet_sync.last_sync,
            error=None if ok else sheet_sync.last_error,
        )
    except Exception as exc:
        logger.exception("sync failed")
        return _error(exc)


@app.post("/advisor/priority", response_model=PriorityResponse)
def advisor_priority(body: PriorityRequest):
    try:
        advice = priority_advisor.advise(body.complaint, body.item_name, body.room_name)
        return PriorityResponse(priority=advice.priority.value, reasoning=advice.reasoning)
    except Exception as exc:
        logger.exception("advisor_priority failed")
        return _error(exc)


@app.get("/export")
def export_records(q: str = Query(default="")):
    try:
        data_ctx = load_dashboard_data(sheet_sync)
        ctx = prepare_context({"query": q}, data_ctx)
        export_df = records_to_frame(ctx["filtered_records"])[RECORD_COLUMNS]
        csv_bytes = export_df.to_csv(index=False).encode("utf-8")
        return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": "attachment; filename=records.csv"})
    except Exception as exc:
        logger.exception("export_records failed")
        return _error(exc)
