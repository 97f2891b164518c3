"""
Campaign hierarchy models.

This module defines the template models (what the user configures) and the
generated models (what a template expands to for a set of data rows).
Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any, Dict, List, Optional
from enum import Enum
from uuid import uuid4
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataRow = Dict[str, Any]


def _new_id() -> str:
    return uuid4().hex[:8]


class CamelModel(BaseModel):
    """Base model accepting and emitting camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AdField(str, Enum):
    """Pattern fields of an ad definition."""
    HEADLINE = "headline"
    DESCRIPTION = "description"
    DISPLAY_URL = "displayUrl"
    FINAL_URL = "finalUrl"

    @property
    def label(self) -> str:
        return {
            AdField.HEADLINE: "Headline",
            AdField.DESCRIPTION: "Description",
            AdField.DISPLAY_URL: "Display URL",
            AdField.FINAL_URL: "Final URL",
        }[self]


class DataSourceColumn(CamelModel):
    """Column of the tabular data source."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name, as used in {variables}")
    type: str = Field(default="string", description="string, number, boolean, date, ...")
    sample_values: Optional[List[str]] = Field(None, description="A few example values")


class AdDefinition(CamelModel):
    """Templated ad."""
    id: str = Field(default_factory=_new_id)
    headline: str = Field(default="", description="Headline pattern")
    description: str = Field(default="", description="Description pattern")
    display_url: Optional[str] = Field(None, description="Display URL pattern")
    final_url: Optional[str] = Field(None, description="Landing page URL pattern")

    def pattern(self, field: AdField) -> Optional[str]:
        """Return the pattern stored for ``field``."""
        return {
            AdField.HEADLINE: self.headline,
            AdField.DESCRIPTION: self.description,
            AdField.DISPLAY_URL: self.display_url,
            AdField.FINAL_URL: self.final_url,
        }[field]


class AdGroupDefinition(CamelModel):
    """Templated ad group owning its ads."""
    id: str = Field(default_factory=_new_id)
    name_pattern: str = Field(default="", description="Ad group name pattern")
    ads: List[AdDefinition] = Field(default_factory=list)
    keywords: Optional[List[str]] = None


class HierarchyConfig(CamelModel):
    """Ad group templates of a campaign set."""
    ad_groups: List[AdGroupDefinition] = Field(default_factory=list)


class CampaignConfig(CamelModel):
    """Campaign-level template settings."""
    name_pattern: str = Field(default="", description="Campaign name pattern")


class GeneratedAd(CamelModel):
    """An ad definition interpolated against one data row."""
    headline: str
    description: str
    display_url: Optional[str] = None
    final_url: Optional[str] = None


class GeneratedAdGroup(CamelModel):
    """Unique ads generated for one (campaign name, ad group name) pair."""
    ad_group_name: str
    ads: List[GeneratedAd] = Field(default_factory=list)
    hidden_ads: int = 0


class GeneratedCampaign(CamelModel):
    """Ad groups whose rows produced the same campaign name."""
    campaign_name: str
    ad_groups: List[GeneratedAdGroup] = Field(default_factory=list)
    hidden_ad_groups: int = 0


class HierarchyStats(CamelModel):
    """Counts reported next to the generated tree."""
    total_campaigns: int = 0
    total_ad_groups: int = 0
    total_ads: int = 0
    rows_processed: int = 0
    rows_skipped: int = 0


class HierarchyPreview(CamelModel):
    """Generated tree plus its statistics."""
    campaigns: List[GeneratedCampaign] = Field(default_factory=list)
    stats: HierarchyStats = Field(default_factory=HierarchyStats)

    def truncated(self, max_ads: int = 5, max_ad_groups: Optional[int] = None) -> "HierarchyPreview":
        """
        Copy of the tree with a bounded number of children per node.

        Stats are left untouched; hidden child counts are recorded on each
        node so the caller can render "and N more".
        """
        campaigns = []
        for campaign in self.campaigns:
            ad_groups = campaign.ad_groups
            hidden_groups = 0
            if max_ad_groups is not None and len(ad_groups) > max_ad_groups:
                hidden_groups = len(ad_groups) - max_ad_groups
                ad_groups = ad_groups[:max_ad_groups]
            campaigns.append(GeneratedCampaign(
                campaign_name=campaign.campaign_name,
                ad_groups=[
                    GeneratedAdGroup(
                        ad_group_name=group.ad_group_name,
                        ads=group.ads[:max_ads],
                        hidden_ads=max(len(group.ads) - max_ads, 0)
                    )
                    for group in ad_groups
                ],
                hidden_ad_groups=hidden_groups
            ))
        return HierarchyPreview(campaigns=campaigns, stats=self.stats.model_copy())
