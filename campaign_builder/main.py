"""
Main FastAPI application module.

Exposes the campaign builder core to UI collaborators: hierarchy preview,
keyword generation, validation and per-platform character limit checks.
"""

from typing import Any, Dict, List, Optional
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import Field

from campaign_builder.config import preview_config, server_config
from campaign_builder.errors import ConfigurationError
from campaign_builder.hierarchy.models import (
    CamelModel,
    CampaignConfig,
    DataSourceColumn,
    HierarchyConfig,
    HierarchyPreview
)
from campaign_builder.hierarchy.resolver import resolve_config
from campaign_builder.keywords.combinator import KeywordCombinator, KeywordStats
from campaign_builder.utils.logging import setup_logger
from campaign_builder.validation.categorizer import categorize
from campaign_builder.validation.engine import check_character_limits, validate_hierarchy
from campaign_builder.validation.models import (
    CharacterLimitSummary,
    ValidationCategory,
    ValidationItem,
    ValidationResult
)

logger = setup_logger(__name__)

app = FastAPI(
    title="Campaign Builder",
    description="Template expansion, keyword generation and validation for campaign sets",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=server_config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


class HierarchyPreviewRequest(CamelModel):
    campaign_config: CampaignConfig
    hierarchy_config: HierarchyConfig
    sample_data: List[Dict[str, Any]] = Field(default_factory=list)
    rows_skipped: int = 0
    max_ads: Optional[int] = None
    max_ad_groups: Optional[int] = None
    truncate: bool = True


class KeywordRequest(CamelModel):
    prefixes: str = ""
    core_terms: str = ""
    suffixes: str = ""
    enabled_modes: Optional[List[str]] = None
    excluded: List[str] = Field(default_factory=list)
    sample_row: Optional[Dict[str, Any]] = None


class KeywordResponse(CamelModel):
    keywords: List[str]
    raw_keywords: List[str]
    preview: List[str]
    stats: KeywordStats


class ValidationRequest(CamelModel):
    hierarchy_config: Optional[HierarchyConfig] = None
    sample_data: List[Dict[str, Any]] = Field(default_factory=list)
    selected_platforms: List[str] = Field(default_factory=list)
    available_columns: List[DataSourceColumn] = Field(default_factory=list)
    extra_errors: List[ValidationItem] = Field(default_factory=list)


class ValidationResponse(CamelModel):
    errors: List[ValidationItem]
    warnings: List[ValidationItem]
    categories: ValidationCategory


class CharacterLimitRequest(CamelModel):
    hierarchy_config: HierarchyConfig
    sample_data: List[Dict[str, Any]] = Field(default_factory=list)
    selected_platforms: List[str] = Field(default_factory=list)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/preview/hierarchy", response_model=HierarchyPreview, response_model_by_alias=True)
async def preview_hierarchy(request: HierarchyPreviewRequest):
    """Expand the templates against the sample rows."""
    preview = resolve_config(
        request.campaign_config,
        request.hierarchy_config,
        request.sample_data,
        rows_skipped=request.rows_skipped
    )
    if request.truncate:
        max_ads = request.max_ads
        if max_ads is None:
            max_ads = preview_config.max_ads_per_ad_group
        max_ad_groups = request.max_ad_groups
        if max_ad_groups is None:
            max_ad_groups = preview_config.max_ad_groups_per_campaign
        preview = preview.truncated(max_ads=max_ads, max_ad_groups=max_ad_groups)
    return preview


@app.post("/preview/keywords", response_model=KeywordResponse, response_model_by_alias=True)
async def preview_keywords(request: KeywordRequest):
    """Generate keywords for one ad group."""
    try:
        combinator = KeywordCombinator(
            prefixes=request.prefixes,
            core_terms=request.core_terms,
            suffixes=request.suffixes,
            enabled_modes=request.enabled_modes
        )
    except ConfigurationError as e:
        logger.warning(f"Rejected keyword request: {e.message}")
        raise HTTPException(status_code=400, detail={"message": e.message, **e.details})

    for keyword in request.excluded:
        combinator.exclude(keyword)

    return KeywordResponse(
        keywords=combinator.keywords(),
        raw_keywords=combinator.raw_keywords(),
        preview=combinator.preview(request.sample_row)[:preview_config.max_keyword_rows],
        stats=combinator.stats()
    )


@app.post("/validate", response_model=ValidationResponse, response_model_by_alias=True)
async def validate(request: ValidationRequest):
    """Validate a hierarchy configuration; every request is evaluated from scratch."""
    result = ValidationResult()
    if request.hierarchy_config is not None:
        result = validate_hierarchy(
            request.hierarchy_config,
            request.sample_data,
            request.selected_platforms,
            request.available_columns
        )
    errors = [*result.errors, *request.extra_errors]
    return ValidationResponse(
        errors=errors,
        warnings=result.warnings,
        categories=categorize(errors, result.warnings)
    )


@app.post("/preview/character-limits", response_model=List[CharacterLimitSummary], response_model_by_alias=True)
async def character_limits(request: CharacterLimitRequest):
    """Per-platform overflow summaries; platforms without overflows are omitted."""
    summaries = [
        check_character_limits(request.sample_data, request.hierarchy_config, platform)
        for platform in request.selected_platforms
    ]
    return [summary for summary in summaries if summary.total_overflows > 0]
