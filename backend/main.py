from fastapi import FastAPI, HTTPException, UploadFile, File, Body
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from typing import Any, List, Optional, Dict
import os
from pathlib import Path
from dotenv import load_dotenv
import json
import shutil
import uuid
from datetime import datetime, timezone

from form_map import FormDefinitionError, build_conditional_map, load_form_definition
from map_clipboard import copy_to_clipboard, notice_for
from map_filter import MapSession, ToggleFlags

load_dotenv()

# Local storage for stored maps
LOCAL_STORAGE_DIR = Path(os.getenv("LOCAL_STORAGE_DIR", str(Path(__file__).parent / "local_storage")))

ANNOTATED_FILENAME = "conditional_map.txt"
METADATA_FILENAME = "metadata.json"

app = FastAPI(title="Conditional Compass Map API")

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Sessions already loaded from local storage, keyed by map id
_session_cache: Dict[str, MapSession] = {}


class MapTextRequest(BaseModel):
    annotated_text: str
    name: Optional[str] = None

class MapView(BaseModel):
    id: str
    name: Optional[str] = None
    text: str
    flags: ToggleFlags

class CopyRequest(BaseModel):
    text: Optional[str] = None  # currently displayed text; rendered from flags when absent
    flags: ToggleFlags = ToggleFlags()

class CopyNoticeResponse(BaseModel):
    type: str
    message: str
    duration_ms: int
    fade_ms: int

class HistoryItem(BaseModel):
    id: str
    name: str
    created_at: str
    source: str

class HistoryListResponse(BaseModel):
    items: List[HistoryItem]


def _map_folder(map_id: str) -> Path:
    # Ids are server generated uuids; anything else cannot name a stored map
    try:
        uuid.UUID(map_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Map not found")

    folder = LOCAL_STORAGE_DIR / map_id
    if not folder.is_dir():
        raise HTTPException(status_code=404, detail="Map not found")
    return folder


def store_map(annotated_text: str, name: str, source: str) -> str:
    """Persist an annotated map under a new id and return the id."""
    map_id = str(uuid.uuid4())
    folder = LOCAL_STORAGE_DIR / map_id
    folder.mkdir(parents=True, exist_ok=True)

    with open(folder / ANNOTATED_FILENAME, "w", encoding="utf-8") as f:
        f.write(annotated_text)

    metadata = {
        "id": map_id,
        "name": name,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "source": source,
    }
    with open(folder / METADATA_FILENAME, "w", encoding="utf-8") as f:
        json.dump(metadata, f, ensure_ascii=False, indent=2)

    _session_cache[map_id] = MapSession(annotated_text, name=name)
    print(f"Stored map {map_id} ({name})")
    return map_id


def get_session(map_id: str) -> MapSession:
    if map_id in _session_cache:
        return _session_cache[map_id]

    folder = _map_folder(map_id)
    annotated_file = folder / ANNOTATED_FILENAME
    if not annotated_file.exists():
        raise HTTPException(status_code=404, detail="Map data not found")

    name = None
    metadata_file = folder / METADATA_FILENAME
    if metadata_file.exists():
        try:
            with open(metadata_file, "r", encoding="utf-8") as f:
                metadata = json.load(f)
            if isinstance(metadata, dict):
                name = metadata.get("name")
            else:
                print(f"Ignoring malformed metadata for {map_id}")
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            print(f"Error reading metadata for {map_id}: {e}")

    try:
        with open(annotated_file, "r", encoding="utf-8") as f:
            session = MapSession(f.read(), name=name)
    except (OSError, UnicodeDecodeError) as e:
        raise HTTPException(status_code=500, detail=f"Error reading map: {e}")

    _session_cache[map_id] = session
    return session


def render_view(map_id: str, flags: ToggleFlags) -> MapView:
    session = get_session(map_id)
    return MapView(id=map_id, name=session.name, text=session.render(flags), flags=flags)


# ============================================================================
# MAP API ENDPOINTS
# ============================================================================

@app.post("/api/maps/upload", response_model=MapView)
async def upload_form(file: UploadFile = File(...)):
    """
    Upload a form export (JSON), build its conditional logic map and store it.
    Returns the initial view: markers stripped, nothing hidden.
    """
    print(f"=== Form Upload Request: {file.filename} ===")

    contents = await file.read()
    try:
        form = load_form_definition(contents)
    except FormDefinitionError as e:
        print(f"ERROR: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    annotated = build_conditional_map(form)
    map_id = store_map(annotated, name=form.title, source=file.filename or "upload")
    return render_view(map_id, ToggleFlags())


@app.post("/api/maps", response_model=MapView)
async def create_map(request: MapTextRequest):
    """Register an annotated map rendered elsewhere."""
    map_id = store_map(request.annotated_text, name=request.name or "Untitled map", source="text")
    return render_view(map_id, ToggleFlags())


@app.get("/api/maps", response_model=HistoryListResponse)
async def list_maps():
    """List stored maps, newest first."""
    items = []

    if LOCAL_STORAGE_DIR.exists():
        for folder in LOCAL_STORAGE_DIR.iterdir():
            metadata_file = folder / METADATA_FILENAME
            if not folder.is_dir() or not metadata_file.exists():
                continue
            try:
                with open(metadata_file, "r", encoding="utf-8") as f:
                    metadata = json.load(f)
            except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                print(f"Error reading metadata for {folder.name}: {e}")
                continue
            if not isinstance(metadata, dict):
                print(f"Skipping malformed metadata for {folder.name}")
                continue

            items.append(HistoryItem(
                id=metadata.get("id", folder.name),
                name=metadata.get("name") or "Unknown",
                created_at=metadata.get("created_at", ""),
                source=metadata.get("source", ""),
            ))

    items.sort(key=lambda x: x.created_at, reverse=True)
    return HistoryListResponse(items=items)


@app.get("/api/maps/{map_id}", response_model=MapView)
async def get_map(
    map_id: str,
    hide_field_number: bool = False,
    hide_field_type: bool = False,
    hide_unused: bool = False,
    hide_used_by: bool = False,
    hide_depends_on: bool = False,
):
    """Filtered view of a stored map; toggles left out of the query are off."""
    flags = ToggleFlags(
        hide_field_number=hide_field_number,
        hide_field_type=hide_field_type,
        hide_unused=hide_unused,
        hide_used_by=hide_used_by,
        hide_depends_on=hide_depends_on,
    )
    return render_view(map_id, flags)


@app.post("/api/maps/{map_id}/filter", response_model=MapView)
async def filter_map_view(map_id: str, controls: Dict[str, Any] = Body(default={})):
    """
    Toggle change: re-render from the stored original.
    The body holds raw control states; missing or unknown controls are ignored.
    """
    try:
        flags = ToggleFlags.from_mapping(controls)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    session = get_session(map_id)
    return MapView(id=map_id, name=session.name, text=session.render_from(controls), flags=flags)


@app.post("/api/maps/{map_id}/copy", response_model=CopyNoticeResponse)
async def copy_map(map_id: str, request: CopyRequest):
    """Copy the displayed map to the clipboard of the host running the API."""
    session = get_session(map_id)
    text = request.text if request.text is not None else session.render(request.flags)

    outcome = await session.copy(text)
    notice = notice_for(outcome)
    print(f"Copy of map {map_id}: {notice.type}")
    return CopyNoticeResponse(
        type=notice.type,
        message=notice.message,
        duration_ms=notice.duration_ms,
        fade_ms=notice.fade_ms,
    )


@app.delete("/api/maps/{map_id}")
async def delete_map(map_id: str):
    """Delete a stored map."""
    folder = _map_folder(map_id)

    try:
        shutil.rmtree(folder)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Error deleting map: {e}")

    _session_cache.pop(map_id, None)
    return JSONResponse(
        status_code=200,
        content={"message": "Map deleted successfully"}
    )


@app.get("/api/health")
def health_check():
    return {"status": "Backend API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
