# file: backend/main.py
"""
FastAPI Backend — Org Chart API v1.

Stateless: every request loads the slots from the store into a fresh
session. No in-memory state between requests.

Endpoints:
  GET  /companies/{company}/tree  — synthesize + return the org tree
  POST /roster/import             — parse upload, preview or replace roster
  PUT  /config/...                — admin edits of one configuration table

Mutations require the ``X-Admin: true`` header.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from org_hierarchy.actions import (
    AddCrossUnitMemberAction,
    AssignLeaderAction,
    BaseAction,
    DeleteEmployeeAction,
    RemoveCrossUnitMemberAction,
    SaveEmployeeAction,
    SetDivisionMappingAction,
    SetMemberTagAction,
    SetSortPriorityAction,
)
from org_hierarchy.domain_types import ActionResult
from org_hierarchy.hashing import tree_hash
from org_hierarchy.invariants import RosterValidationError
from org_runtime.session import OrgChartSession, PermissionDeniedError
from org_runtime.store import KeyValueStore, SqliteKeyValueStore
from roster_ingest.adapter import parse_roster_rows
from roster_ingest.errors import IngestionError
from roster_ingest.workbook import read_roster_file

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DATABASE_URL = os.environ.get("DATABASE_URL", "")
ORGCHART_DB_PATH = os.environ.get("ORGCHART_DB_PATH", "orgchart.sqlite3")
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="OrgChart API",
    version="1.0.0",
    description="Organizational hierarchy synthesis over an employee roster",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class EmployeeRequest(BaseModel):
    name: str = ""
    english_name: str = ""
    primary_company: str = ""
    division: str = ""
    department: str = ""
    team: str = ""
    position: str = ""
    duty: str = ""
    phone: str = ""
    joined_date: str = ""
    email: str = ""
    extension_number: str = ""
    birth_date: Optional[str] = None
    status: str = "ACTIVE"
    avatar_url: str = ""
    display_order: Optional[int] = None
    is_head: bool = False


class ImportRowsRequest(BaseModel):
    rows: List[List[Any]]
    confirm: bool = False
    default_company: str = ""


class DivisionMappingRequest(BaseModel):
    label: str
    division: str = ""


class SortPriorityRequest(BaseModel):
    node_key: str
    priority: Optional[int] = None


class NodeMemberRequest(BaseModel):
    node_key: str
    employee_id: str = ""


class MemberTagRequest(BaseModel):
    employee_id: str
    tag: str = ""


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------

_sqlite_store: Optional[SqliteKeyValueStore] = None


def _get_store() -> KeyValueStore:
    """PostgreSQL when DATABASE_URL is configured, a local sqlite file otherwise."""
    global _sqlite_store
    if DATABASE_URL:
        from backend.pg_store import PgKeyValueStore
        return PgKeyValueStore(DATABASE_URL)
    if _sqlite_store is None:
        _sqlite_store = SqliteKeyValueStore(ORGCHART_DB_PATH)
        logger.info("Using sqlite slot store at %s", ORGCHART_DB_PATH)
    return _sqlite_store


def _get_session(
    store: KeyValueStore = Depends(_get_store),
    x_admin: str = Header("", alias="X-Admin"),
) -> OrgChartSession:
    is_admin = x_admin.strip().lower() == "true"
    return OrgChartSession(store, is_admin=is_admin).initialize()


def _result_dict(result: ActionResult) -> dict:
    return {
        "action_type": result.action_type,
        "success": result.success,
        "changed_slots": list(result.changed_slots),
        "reason": result.reason,
    }


def _apply(session: OrgChartSession, action: BaseAction) -> dict:
    """Apply one action, mapping domain errors onto HTTP status codes."""
    try:
        _, result = session.apply_action(action)
    except PermissionDeniedError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except RosterValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0]))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _result_dict(result)


def _import(session: OrgChartSession, rows: List[List[Any]], confirm: bool,
            default_company: str = "") -> dict:
    try:
        ingestion = parse_roster_rows(rows, default_company=default_company)
        return session.import_roster(ingestion, confirmed=confirm)
    except PermissionDeniedError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except (IngestionError, RosterValidationError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))


def _require_company(session: OrgChartSession, company: str) -> None:
    if company not in session.engine.companies():
        raise HTTPException(status_code=404, detail=f"Unknown company: {company!r}")


# ---------------------------------------------------------------------------
# Endpoints: reads
# ---------------------------------------------------------------------------


@app.get("/health")
def health():
    return {"status": "ok", "version": "1.0.0"}


@app.get("/companies")
def list_companies(session: OrgChartSession = Depends(_get_session)):
    return {"companies": session.engine.companies()}


@app.get("/companies/{company}/tree")
def get_tree(company: str, session: OrgChartSession = Depends(_get_session)):
    """Synthesize the company's org tree from the current slots."""
    _require_company(session, company)
    tree = session.build_tree(company)
    return {"tree_hash": tree_hash(tree), "tree": tree.to_dict()}


@app.get("/companies/{company}/employees")
def list_employees(
    company: str,
    q: str = Query("", description="Case-insensitive search term"),
    session: OrgChartSession = Depends(_get_session),
):
    employees = session.engine.employees(company, q)
    return {"employees": [e.to_dict() for e in employees]}


@app.get("/companies/{company}/grouped-employees")
def grouped_employees(company: str, session: OrgChartSession = Depends(_get_session)):
    return {"divisions": session.engine.grouped_employees(company)}


@app.get("/companies/{company}/units")
def list_units(company: str, session: OrgChartSession = Depends(_get_session)):
    return {"divisions": session.engine.units(company)}


@app.get("/companies/{company}/diagnostics")
def get_diagnostics(company: str, session: OrgChartSession = Depends(_get_session)):
    _require_company(session, company)
    return session.get_diagnostics(company)


@app.get("/companies/{company}/metrics")
def get_metrics(company: str, session: OrgChartSession = Depends(_get_session)):
    _require_company(session, company)
    return session.get_metrics(company).to_dict()


@app.get("/employees/{employee_id}/leader-role")
def get_leader_role(employee_id: str, session: OrgChartSession = Depends(_get_session)):
    if employee_id not in session.state.employee_index():
        raise HTTPException(status_code=404, detail=f"Unknown employee: {employee_id!r}")
    return {"employee_id": employee_id, "leader_role": session.engine.leader_role(employee_id)}


@app.get("/config")
def get_config(session: OrgChartSession = Depends(_get_session)):
    return session.state.config.to_dict()


# ---------------------------------------------------------------------------
# Endpoints: roster ingestion
# ---------------------------------------------------------------------------


@app.post("/roster/import")
async def import_roster_file(
    file: UploadFile = File(...),
    confirm: bool = Form(False),
    default_company: str = Form(""),
    session: OrgChartSession = Depends(_get_session),
):
    """
    Parse an uploaded .xlsx/.csv roster.

    Without ``confirm`` the parse summary and roster diff are returned and
    nothing changes; with it the stored roster is replaced wholesale.
    """
    if not session.is_admin:
        raise HTTPException(status_code=403, detail="Administrator rights required")
    content = await file.read()
    try:
        rows = read_roster_file(file.filename or "", content)
    except IngestionError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _import(session, rows, confirm, default_company)


@app.post("/roster/import-rows")
def import_roster_rows(req: ImportRowsRequest, session: OrgChartSession = Depends(_get_session)):
    return _import(session, req.rows, req.confirm, req.default_company)


# ---------------------------------------------------------------------------
# Endpoints: roster edits
# ---------------------------------------------------------------------------


@app.put("/employees/{employee_id}")
def save_employee(employee_id: str, req: EmployeeRequest,
                  session: OrgChartSession = Depends(_get_session)):
    """
    Create or edit one employee. An edit is a merge: fields the client
    did not send keep their stored values.
    """
    existing = session.state.employee_index().get(employee_id)
    if existing is None:
        employee: Dict[str, Any] = req.model_dump()
    else:
        employee = {**existing.to_dict(), **req.model_dump(exclude_unset=True)}
    employee["id"] = employee_id
    return _apply(session, SaveEmployeeAction(payload={"employee": employee}))


@app.delete("/employees/{employee_id}")
def delete_employee(employee_id: str, session: OrgChartSession = Depends(_get_session)):
    return _apply(session, DeleteEmployeeAction(payload={"employee_id": employee_id}))


# ---------------------------------------------------------------------------
# Endpoints: configuration tables
# ---------------------------------------------------------------------------


@app.put("/config/grouping")
def set_division_mapping(req: DivisionMappingRequest,
                         session: OrgChartSession = Depends(_get_session)):
    return _apply(session, SetDivisionMappingAction(payload=req.model_dump()))


@app.put("/config/sort-order")
def set_sort_priority(req: SortPriorityRequest,
                      session: OrgChartSession = Depends(_get_session)):
    return _apply(session, SetSortPriorityAction(payload=req.model_dump()))


@app.put("/config/leaders")
def assign_leader(req: NodeMemberRequest, session: OrgChartSession = Depends(_get_session)):
    return _apply(session, AssignLeaderAction(payload=req.model_dump()))


@app.post("/config/cross-unit")
def add_cross_unit_member(req: NodeMemberRequest,
                          session: OrgChartSession = Depends(_get_session)):
    return _apply(session, AddCrossUnitMemberAction(payload=req.model_dump()))


@app.delete("/config/cross-unit")
def remove_cross_unit_member(req: NodeMemberRequest,
                             session: OrgChartSession = Depends(_get_session)):
    return _apply(session, RemoveCrossUnitMemberAction(payload=req.model_dump()))


@app.put("/config/member-tags")
def set_member_tag(req: MemberTagRequest, session: OrgChartSession = Depends(_get_session)):
    return _apply(session, SetMemberTagAction(payload=req.model_dump()))
