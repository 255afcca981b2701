"""API routes for editing the funnel graph."""

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile
from pydantic import BaseModel, Field

from funnelkit.errors import FunnelError
from funnelkit.models import (
    NODE_TEMPLATES,
    FunnelEdge,
    FunnelNode,
    GraphChange,
    NodeCounters,
    NodeTemplate,
    Position,
    RenderNode,
    ValidationResult,
)
from funnelkit.session import EXPORT_FILENAME, FunnelSession

router = APIRouter()


def get_session(request: Request) -> FunnelSession:
    """The editing session created at startup."""
    return request.app.state.session


class FunnelState(BaseModel):
    """Everything the editing surface renders from."""

    model_config = {"populate_by_name": True}

    nodes: list[RenderNode]
    edges: list[FunnelEdge]
    node_counters: NodeCounters = Field(alias="nodeCounters")
    validation: ValidationResult
    can_undo: bool = Field(alias="canUndo")
    can_redo: bool = Field(alias="canRedo")


class AddNodeRequest(BaseModel):
    """request body for dropping a node on the canvas."""

    type: str
    position: Position


class ConnectRequest(BaseModel):
    source: str
    target: str


class DeleteRequest(BaseModel):
    ids: list[str]


class ChangesRequest(BaseModel):
    """request body for transient position/selection updates."""

    changes: list[GraphChange]
    record: bool = False


def _state(session: FunnelSession) -> FunnelState:
    store = session.store
    return FunnelState(
        nodes=store.render_nodes(),
        edges=store.edges,
        node_counters=store.counters,
        validation=store.validation,
        can_undo=store.can_undo,
        can_redo=store.can_redo,
    )


def _http_error(exc: FunnelError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@router.get("/node-templates")
def list_node_templates() -> list[NodeTemplate]:
    """list the static node templates, including connection capability."""
    return list(NODE_TEMPLATES.values())


@router.get("/funnel")
def get_funnel(session: FunnelSession = Depends(get_session)) -> FunnelState:
    """get the live funnel with diagnostics."""
    return _state(session)


@router.post("/funnel/nodes", status_code=201)
def add_node(
    request: AddNodeRequest,
    session: FunnelSession = Depends(get_session),
) -> FunnelNode:
    """drop a new node of the given type."""
    try:
        return session.store.add_node(request.type, request.position)
    except FunnelError as exc:
        raise _http_error(exc) from exc


@router.post("/funnel/nodes/delete")
def delete_nodes(
    request: DeleteRequest,
    session: FunnelSession = Depends(get_session),
) -> FunnelState:
    """delete nodes together with their edges."""
    session.store.remove_nodes(request.ids)
    return _state(session)


@router.post("/funnel/edges", status_code=201)
def connect(
    request: ConnectRequest,
    session: FunnelSession = Depends(get_session),
) -> FunnelEdge:
    """connect two existing nodes."""
    edge = session.store.connect(request.source, request.target)
    if edge is None:
        raise HTTPException(
            status_code=404,
            detail=f"Node not found: {request.source} -> {request.target}",
        )
    return edge


@router.post("/funnel/edges/delete")
def delete_edges(
    request: DeleteRequest,
    session: FunnelSession = Depends(get_session),
) -> FunnelState:
    """delete edges by id."""
    session.store.remove_edges(request.ids)
    return _state(session)


@router.post("/funnel/changes")
def apply_changes(
    request: ChangesRequest,
    session: FunnelSession = Depends(get_session),
) -> FunnelState:
    """apply position/selection changes, recorded in history only on request."""
    session.store.apply_changes(request.changes, record=request.record)
    return _state(session)


@router.post("/funnel/undo")
def undo(session: FunnelSession = Depends(get_session)) -> FunnelState:
    session.store.undo()
    return _state(session)


@router.post("/funnel/redo")
def redo(session: FunnelSession = Depends(get_session)) -> FunnelState:
    session.store.redo()
    return _state(session)


@router.post("/funnel/save")
def save(session: FunnelSession = Depends(get_session)) -> dict:
    """save the funnel to host storage."""
    try:
        document = session.save()
    except FunnelError as exc:
        raise _http_error(exc) from exc
    return {"saved": True, "savedAt": document.saved_at}


@router.post("/funnel/load")
def load(session: FunnelSession = Depends(get_session)) -> FunnelState:
    """reload the stored funnel, replacing the live graph and history."""
    try:
        found = session.load()
    except FunnelError as exc:
        raise _http_error(exc) from exc
    if not found:
        raise HTTPException(status_code=404, detail="No stored funnel")
    return _state(session)


@router.get("/funnel/export")
def export_funnel(session: FunnelSession = Depends(get_session)) -> Response:
    """download the funnel as a JSON document."""
    return Response(
        content=session.export_bytes(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/funnel/import")
async def import_funnel(
    file: UploadFile = File(...),
    session: FunnelSession = Depends(get_session),
) -> FunnelState:
    """import an uploaded funnel document, resetting undo history."""
    try:
        await session.import_stream(file)
    except FunnelError as exc:
        raise _http_error(exc) from exc
    return _state(session)
