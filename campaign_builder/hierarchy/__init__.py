"""
Hierarchy package: template models and the resolver that expands them.
"""
from .models import (
    AdField,
    DataSourceColumn,
    AdDefinition,
    AdGroupDefinition,
    HierarchyConfig,
    CampaignConfig,
    GeneratedAd,
    GeneratedAdGroup,
    GeneratedCampaign,
    HierarchyStats,
    HierarchyPreview
)
from .resolver import resolve, resolve_config, ad_dedup_key, generate_ad

__all__ = [
    'AdField',
    'DataSourceColumn',
    'AdDefinition',
    'AdGroupDefinition',
    'HierarchyConfig',
    'CampaignConfig',
    'GeneratedAd',
    'GeneratedAdGroup',
    'GeneratedCampaign',
    'HierarchyStats',
    'HierarchyPreview',
    'resolve',
    'resolve_config',
    'ad_dedup_key',
    'generate_ad'
]
