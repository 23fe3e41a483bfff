"""
API routes for the Mizan morphology service.

Groups:
- /roots: register, list, inspect, remove, import
- /schemes: register, list, update, remove, import
- /generate: single word, whole family, one scheme over all roots
- /decompose, /validate: word back to (root, scheme)
- /statistics, /health
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from .. import __version__
from ..engine import MorphologyEngine, OperationResult, Status
from ..root_tree import RootNode
from ..root_types import Root, explain_root
from ..schemes import Scheme, SchemeShape
from .schemas import (
    DecomposeRequest,
    DecomposeResponse,
    DecompositionInfo,
    DerivedWordInfo,
    GenerateRequest,
    GeneratedWordResponse,
    HealthResponse,
    ImportRequest,
    ImportResponse,
    ImportEntryInfo,
    OperationResponse,
    RootAnalysis,
    RootInfo,
    RootListResponse,
    RootRequest,
    SchemeGenerateRequest,
    SchemeInfo,
    SchemeRequest,
    SchemeUpdateRequest,
    SchemeUsageInfo,
    StatisticsResponse,
    ValidateRequest,
    ValidateResponse,
)

router = APIRouter()


def get_engine(request: Request) -> MorphologyEngine:
    """The engine owned by the running app."""
    return request.app.state.engine


def _operation(result: OperationResult) -> OperationResponse:
    if result.status in (Status.INVALID_ROOT, Status.INVALID_RULE):
        raise HTTPException(status_code=400, detail=result.reason)
    return OperationResponse(
        success=result.ok,
        status=result.status.value,
        subject=result.subject,
        message=result.reason,
    )


def _root_info(root: Root, node: Optional[RootNode] = None) -> dict:
    return dict(
        root=root.spelling,
        letters=list(root.letters),
        category=root.category.name,
        category_ar=root.category.name_ar,
        category_en=root.category.name_en,
        has_hamza=root.has_hamza,
        total_derivations=node.total_derivations if node else 0,
    )


def _scheme_info(scheme: Scheme) -> SchemeInfo:
    shapes = [s.name for s in SchemeShape if s.name != 'NONE' and s in scheme.shape]
    return SchemeInfo(name=scheme.name, rule=scheme.rule, pattern=scheme.pattern, shapes=shapes)


def _import_response(report) -> ImportResponse:
    return ImportResponse(
        added=report.added,
        skipped=report.skipped,
        entries=[ImportEntryInfo(**vars(e)) for e in report.entries],
    )


# ----------------------------------------------------------------------
# Roots
# ----------------------------------------------------------------------

@router.post("/roots", response_model=OperationResponse)
async def add_root(body: RootRequest, engine: MorphologyEngine = Depends(get_engine)):
    """Classify and register a root."""
    return _operation(engine.register_root(body.root))


@router.get("/roots", response_model=RootListResponse)
async def list_roots(
    search: Optional[str] = Query(None, description="Prefix filter"),
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(10, description="Roots per page"),
    engine: MorphologyEngine = Depends(get_engine),
):
    """Registered roots in alphabetical order, paginated."""
    page = max(1, page)
    if limit < 1:
        limit = engine.config.default_page_size
    return RootListResponse(
        roots=engine.list_roots(search, (page - 1) * limit, limit),
        total=engine.count_roots(search),
        page=page,
        limit=limit,
    )


@router.post("/roots/import", response_model=ImportResponse)
async def import_roots(body: ImportRequest, engine: MorphologyEngine = Depends(get_engine)):
    """Register one root per line; bad lines are reported, not fatal."""
    return _import_response(engine.import_roots(body.content.splitlines()))


@router.get("/roots/{root}/analysis", response_model=RootAnalysis)
async def analyze_root(root: str, engine: MorphologyEngine = Depends(get_engine)):
    """Classify a root without registering it."""
    classified = engine.classify(root)
    if not classified.is_valid:
        raise HTTPException(status_code=400, detail=classified.error)
    return RootAnalysis(
        **_root_info(classified, engine.find_root(root)),
        explanation=explain_root(classified),
    )


@router.get("/roots/{root}/derivatives", response_model=List[DerivedWordInfo])
async def root_derivatives(root: str, engine: MorphologyEngine = Depends(get_engine)):
    """Words derived from a root, most frequent first."""
    if engine.find_root(root) is None:
        raise HTTPException(status_code=404, detail=f"Root {root} is not registered")
    return [DerivedWordInfo(**vars(w)) for w in engine.derivatives(root)]


@router.get("/roots/{root}", response_model=RootInfo)
async def get_root(root: str, engine: MorphologyEngine = Depends(get_engine)):
    node = engine.find_root(root)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Root {root} is not registered")
    return RootInfo(**_root_info(node.root, node))


@router.delete("/roots/{root}", response_model=OperationResponse)
async def delete_root(root: str, engine: MorphologyEngine = Depends(get_engine)):
    return _operation(engine.remove_root(root))


# ----------------------------------------------------------------------
# Schemes
# ----------------------------------------------------------------------

@router.get("/schemes", response_model=List[SchemeInfo])
async def list_schemes(engine: MorphologyEngine = Depends(get_engine)):
    """Schemes in the order they were added."""
    return [_scheme_info(s) for s in engine.list_schemes()]


@router.post("/schemes", response_model=OperationResponse)
async def add_scheme(body: SchemeRequest, engine: MorphologyEngine = Depends(get_engine)):
    return _operation(engine.register_scheme(body.name, body.rule))


@router.post("/schemes/import", response_model=ImportResponse)
async def import_schemes(body: ImportRequest, engine: MorphologyEngine = Depends(get_engine)):
    """Register one name|rule pair per line."""
    return _import_response(engine.import_schemes(body.content.splitlines()))


@router.get("/schemes/{name}/usage", response_model=List[SchemeUsageInfo])
async def scheme_usage(name: str, engine: MorphologyEngine = Depends(get_engine)):
    """Stored derivations made with this scheme."""
    return [SchemeUsageInfo(**vars(u)) for u in engine.search_by_scheme(name)]


@router.get("/schemes/{name}", response_model=SchemeInfo)
async def get_scheme(name: str, engine: MorphologyEngine = Depends(get_engine)):
    scheme = engine.find_scheme(name)
    if scheme is None:
        raise HTTPException(status_code=404, detail=f"Scheme {name} does not exist")
    return _scheme_info(scheme)


@router.put("/schemes/{name}", response_model=OperationResponse)
async def update_scheme(name: str, body: SchemeUpdateRequest,
                        engine: MorphologyEngine = Depends(get_engine)):
    return _operation(engine.update_scheme(name, body.rule))


@router.delete("/schemes/{name}", response_model=OperationResponse)
async def delete_scheme(name: str, engine: MorphologyEngine = Depends(get_engine)):
    return _operation(engine.remove_scheme(name))


# ----------------------------------------------------------------------
# Generation / decomposition
# ----------------------------------------------------------------------

def _generated(word) -> GeneratedWordResponse:
    return GeneratedWordResponse(
        surface=word.surface,
        root=word.root,
        scheme=word.scheme,
        success=word.success,
        message=word.message,
        category=word.category.name if word.category else None,
    )


@router.post("/generate", response_model=GeneratedWordResponse)
async def generate(body: GenerateRequest, engine: MorphologyEngine = Depends(get_engine)):
    """Derive one word from a root and a scheme."""
    return _generated(engine.derive_word(body.root, body.scheme))


@router.post("/generate/by-scheme", response_model=List[GeneratedWordResponse])
async def generate_by_scheme(body: SchemeGenerateRequest,
                             engine: MorphologyEngine = Depends(get_engine)):
    """Apply one scheme to every registered root; only successes are returned."""
    return [_generated(w) for w in engine.derive_by_scheme(body.scheme)]


@router.get("/generate/{root}/family", response_model=List[GeneratedWordResponse])
async def generate_family(root: str, engine: MorphologyEngine = Depends(get_engine)):
    """Derive one word per registered scheme."""
    return [_generated(w) for w in engine.derive_family(root)]


@router.post("/decompose", response_model=DecomposeResponse)
async def decompose(body: DecomposeRequest, engine: MorphologyEngine = Depends(get_engine)):
    """Find the root and scheme that produce a word."""
    if body.all:
        results = engine.decompose_all(body.word)
    else:
        first = engine.decompose(body.word)
        results = [first] if first else []

    if not results:
        return DecomposeResponse(success=False, message=f"No root and scheme produce {body.word}")
    return DecomposeResponse(
        success=True,
        message=f"Found {len(results)} decomposition(s)",
        results=[
            DecompositionInfo(
                word=r.word, root=r.root, scheme=r.scheme, rule=r.rule,
                category=r.category.name, added_elements=r.added_elements,
            )
            for r in results
        ],
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate(body: ValidateRequest, engine: MorphologyEngine = Depends(get_engine)):
    """Check whether a word derives from a given root."""
    if engine.find_root(body.root) is None:
        return ValidateResponse(word=body.word, root=body.root, valid=False,
                                message=f"Root {body.root} is not registered")
    scheme = engine.validate_word(body.word, body.root)
    if scheme is None:
        return ValidateResponse(word=body.word, root=body.root, valid=False,
                                message=f"{body.word} does not derive from {body.root}")
    return ValidateResponse(word=body.word, root=body.root, valid=True, scheme=scheme,
                            message=f"{body.word} derives from {body.root} with {scheme}")


# ----------------------------------------------------------------------
# Statistics / health
# ----------------------------------------------------------------------

@router.get("/statistics", response_model=StatisticsResponse)
async def statistics(engine: MorphologyEngine = Depends(get_engine)):
    return StatisticsResponse(**vars(engine.statistics()))


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", version=__version__)
