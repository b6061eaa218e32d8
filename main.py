from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordBearer

from ai_client import build_text_generator
from capabilities import can_edit_routine, can_post_note, can_use_notepad
from config import get_settings
from dashboard import Dashboard, SessionRegistry
from errors import DashboardError
from logging_config import get_logger, setup_logging
from schemas import CellEdit, ClassSelection, LoginRequest, PeriodLabelEdit, PromptIn, TabSelection, TextIn, Token
from security import create_access_token, decode_access_token
from store import SchoolStore

settings = get_settings()
setup_logging(json_output=settings.log_json, log_level=settings.log_level)
logger = get_logger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

app = FastAPI(title="School Dashboard API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Canonical data and live sessions for this process
sessions = SessionRegistry(
    SchoolStore.with_defaults(),
    build_text_generator(settings),
    ttl=timedelta(minutes=settings.access_token_expire_minutes),
)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


# ----------------------- Session Helpers -----------------------
def get_sessions() -> SessionRegistry:
    return sessions


def get_session_id(token: str = Depends(oauth2_scheme)) -> str:
    payload = decode_access_token(token)
    session_id: Optional[str] = payload.get("sid") if payload else None
    if not session_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    return session_id


async def get_dashboard(
    session_id: str = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_sessions),
) -> Dashboard:
    dashboard = registry.get(session_id)
    if dashboard is None:
        raise HTTPException(status_code=401, detail="Session expired")
    dashboard.sync()
    return dashboard


def require(allowed: bool) -> None:
    if not allowed:
        raise HTTPException(status_code=403, detail="Not authorized")


def render(dashboard: Dashboard) -> dict:
    return {"school_name": settings.school_name, **dashboard.view()}


# ----------------------- Health -----------------------
@app.get("/")
async def read_root():
    return {"message": "School Dashboard API running"}


@app.get("/health")
async def health():
    return {"ok": True, "time": datetime.now(timezone.utc).isoformat()}


# ----------------------- Auth Endpoints -----------------------
# plain def so bcrypt runs in the threadpool, off the event loop
@app.post("/auth/login", response_model=Token)
def login(payload: LoginRequest, registry: SessionRegistry = Depends(get_sessions)):
    if not payload.username.strip() or not payload.password.strip():
        raise HTTPException(status_code=400, detail="Please enter all required fields.")
    user = registry.store.authenticate(payload.username, payload.password, payload.role)
    if user is None:
        logger.info("login_failed", username=payload.username, role=payload.role.value)
        raise HTTPException(status_code=400, detail="Invalid credentials or role. Please try again.")
    session_id = registry.open(user)
    token = create_access_token({"sub": user.username, "sid": session_id, "role": user.role.value})
    return Token(access_token=token)


@app.post("/auth/logout")
async def logout(session_id: str = Depends(get_session_id), registry: SessionRegistry = Depends(get_sessions)):
    registry.close(session_id)
    return {"status": "logged out"}


# ----------------------- Dashboard -----------------------
@app.get("/dashboard")
async def read_dashboard(dashboard: Dashboard = Depends(get_dashboard)):
    return render(dashboard)


@app.put("/dashboard/tab")
async def switch_tab(payload: TabSelection, dashboard: Dashboard = Depends(get_dashboard)):
    require(dashboard.set_tab(payload.tab))
    return render(dashboard)


@app.put("/dashboard/class")
async def select_class(payload: ClassSelection, dashboard: Dashboard = Depends(get_dashboard)):
    require(dashboard.select_class(payload.class_name))
    return render(dashboard)


# ----------------------- Routine -----------------------
@app.put("/routine/cell")
async def edit_cell(payload: CellEdit, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_edit_routine(dashboard.user.role))
    dashboard.routine.set_field(payload.day, payload.period_index, payload.field, payload.value)
    return render(dashboard)


@app.put("/routine/period")
async def edit_period_label(payload: PeriodLabelEdit, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_edit_routine(dashboard.user.role))
    dashboard.routine.set_period_label(payload.period_index, payload.value)
    return render(dashboard)


@app.post("/routine/save")
async def save_routine(dashboard: Dashboard = Depends(get_dashboard)):
    require(can_edit_routine(dashboard.user.role))
    dashboard.routine.save()
    return render(dashboard)


# ----------------------- Announcements -----------------------
@app.post("/notes")
async def add_note(payload: TextIn, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_post_note(dashboard.user.role))
    dashboard.notes.add(payload.content)
    return render(dashboard)


@app.post("/notes/{note_id}/edit")
async def start_note_edit(note_id: str, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_post_note(dashboard.user.role))
    dashboard.notes.start_edit(dashboard.store.get_note(note_id))
    return render(dashboard)


@app.put("/notes/editing/draft")
async def set_note_draft(payload: TextIn, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_post_note(dashboard.user.role))
    dashboard.notes.set_draft(payload.content)
    return render(dashboard)


@app.post("/notes/editing/save")
async def save_note_edit(dashboard: Dashboard = Depends(get_dashboard)):
    require(can_post_note(dashboard.user.role))
    dashboard.notes.save_edit()
    return render(dashboard)


@app.post("/notes/editing/cancel")
async def cancel_note_edit(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.notes.cancel_edit()
    return render(dashboard)


@app.delete("/notes/{note_id}")
async def delete_note(note_id: str, confirm: bool = False, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_post_note(dashboard.user.role))
    dashboard.store.get_note(note_id)
    dashboard.notes.delete(note_id, confirm=lambda message: confirm)
    return render(dashboard)


# ----------------------- Notepad -----------------------
@app.put("/notepad/content")
async def edit_notepad(payload: TextIn, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_use_notepad(dashboard.user.role))
    dashboard.notepad.edit(payload.content)
    return render(dashboard)


@app.put("/notepad/prompt")
async def set_notepad_prompt(payload: PromptIn, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_use_notepad(dashboard.user.role))
    dashboard.notepad.set_prompt(payload.prompt or "")
    return render(dashboard)


@app.post("/notepad/assist")
async def toggle_assist_panel(dashboard: Dashboard = Depends(get_dashboard)):
    require(can_use_notepad(dashboard.user.role))
    dashboard.notepad.toggle_assist_panel()
    return render(dashboard)


@app.post("/notepad/generate")
async def generate_notepad_content(payload: Optional[PromptIn] = None, dashboard: Dashboard = Depends(get_dashboard)):
    require(can_use_notepad(dashboard.user.role))
    await dashboard.notepad.request_generation(payload.prompt if payload else None)
    return render(dashboard)


@app.post("/notepad/save")
async def save_notepad(dashboard: Dashboard = Depends(get_dashboard)):
    require(can_use_notepad(dashboard.user.role))
    dashboard.notepad.save()
    return render(dashboard)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
