"""Pydantic models for API request/response schemas."""

from typing import List, Optional
from pydantic import BaseModel, Field


class RootRequest(BaseModel):
    """Request body for adding a root."""
    root: str = Field(..., min_length=1, max_length=50, description="Triliteral root, e.g. كتب")

    model_config = {
        "json_schema_extra": {
            "examples": [{"root": "كتب"}]
        }
    }


class RootInfo(BaseModel):
    """A registered or classified root."""
    root: str = Field(..., description="Root spelling (three letters)")
    letters: List[str] = Field(default_factory=list, description="The three radicals")
    category: str = Field(..., description="Category key: REGULAR, HOLLOW, ...")
    category_ar: str = Field(..., description="Arabic category name")
    category_en: str = Field(..., description="English category name")
    has_hamza: bool = Field(..., description="Whether a radical is a hamza form")
    total_derivations: int = Field(default=0, description="Derivations recorded on this root")


class RootAnalysis(RootInfo):
    """Classification plus explanation."""
    explanation: str = Field(..., description="Why the root has this category")


class RootListResponse(BaseModel):
    roots: List[str] = Field(default_factory=list, description="Roots on this page")
    total: int = Field(..., description="Roots matching the filter")
    page: int
    limit: int


class OperationResponse(BaseModel):
    """Outcome of a registry operation."""
    success: bool
    status: str = Field(..., description="added, already_exists, updated, removed, not_found, ...")
    subject: str
    message: Optional[str] = None


class DerivedWordInfo(BaseModel):
    surface: str
    frequency: int
    scheme: Optional[str] = None


class SchemeRequest(BaseModel):
    """Request body for adding a scheme."""
    name: str = Field(..., min_length=1, max_length=100, description="Scheme name, e.g. فَاعِل")
    rule: str = Field(..., min_length=1, max_length=100, description="Rule with markers 1, 2, 3")

    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "فَاعِل", "rule": "1َا2ِ3"}]
        }
    }


class SchemeUpdateRequest(BaseModel):
    rule: str = Field(..., min_length=1, max_length=100, description="New rule with markers 1, 2, 3")


class SchemeInfo(BaseModel):
    name: str
    rule: str
    pattern: str = Field(..., description="Rule written with ف/ع/ل")
    shapes: List[str] = Field(default_factory=list, description="Sniffed grammatical shapes")


class ImportRequest(BaseModel):
    """Newline-delimited import text."""
    content: str = Field(..., description="Roots one per line, or name|rule pairs for schemes")


class ImportEntryInfo(BaseModel):
    line_number: int
    text: str
    added: bool
    reason: Optional[str] = None


class ImportResponse(BaseModel):
    added: int
    skipped: int
    entries: List[ImportEntryInfo] = Field(default_factory=list)


class GenerateRequest(BaseModel):
    """Request body for deriving a word."""
    root: str = Field(..., min_length=1, max_length=50)
    scheme: str = Field(..., min_length=1, max_length=100)

    model_config = {
        "json_schema_extra": {
            "examples": [{"root": "قول", "scheme": "فَاعِل"}]
        }
    }


class SchemeGenerateRequest(BaseModel):
    """Request body for applying one scheme to every registered root."""
    scheme: str = Field(..., min_length=1, max_length=100)

    model_config = {
        "json_schema_extra": {
            "examples": [{"scheme": "فَاعِل"}]
        }
    }


class GeneratedWordResponse(BaseModel):
    surface: Optional[str] = Field(None, description="Derived word, null on failure")
    root: str
    scheme: Optional[str] = None
    success: bool
    message: str
    category: Optional[str] = None


class DecomposeRequest(BaseModel):
    word: str = Field(..., min_length=1, max_length=100, description="Word to decompose")
    all: bool = Field(default=False, description="Return every matching pair")


class DecompositionInfo(BaseModel):
    word: str
    root: str
    scheme: str
    rule: str
    category: str
    added_elements: List[str] = Field(default_factory=list)


class DecomposeResponse(BaseModel):
    success: bool
    message: str
    results: List[DecompositionInfo] = Field(default_factory=list)


class ValidateRequest(BaseModel):
    word: str = Field(..., min_length=1, max_length=100)
    root: str = Field(..., min_length=1, max_length=50)


class ValidateResponse(BaseModel):
    word: str
    root: str
    valid: bool
    scheme: Optional[str] = None
    message: str


class SchemeUsageInfo(BaseModel):
    root: str
    surface: str
    frequency: int


class StatisticsResponse(BaseModel):
    total_roots: int
    total_schemes: int
    total_derivations: int
    total_frequency: int
    average_derivations: float
    tree_height: int
    load_factor: float
    collisions: int
    longest_chain: int


class HealthResponse(BaseModel):
    status: str
    version: str
