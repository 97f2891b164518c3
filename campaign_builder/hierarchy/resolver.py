"""
Hierarchy resolver.

Expands ad group templates against every data row into a concrete
Campaign -> Ad Group -> Ad tree. Campaigns and ad groups are grouped by
their interpolated names; ads are deduplicated per ad group on their
headline and description.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from campaign_builder.hierarchy.models import (
    AdDefinition,
    AdGroupDefinition,
    CampaignConfig,
    GeneratedAd,
    GeneratedAdGroup,
    GeneratedCampaign,
    HierarchyConfig,
    HierarchyPreview,
    HierarchyStats
)
from campaign_builder.patterns.engine import interpolate_pattern

logger = logging.getLogger(__name__)

# NUL never appears in user-entered text, unlike "|" which is also filter syntax
DEDUP_SEPARATOR = "\0"


def ad_dedup_key(headline: str, description: str) -> str:
    """
    Build the deduplication key of a generated ad.

    URLs are not part of the identity: two ads that differ only in their
    URLs collapse to the first one seen.
    """
    return f"{headline}{DEDUP_SEPARATOR}{description}"


class _AdGroupBucket:
    """Ordered set of unique ads for one ad group."""

    def __init__(self) -> None:
        self.ads: List[GeneratedAd] = []
        self.seen: set = set()

    def add(self, ad: GeneratedAd) -> bool:
        key = ad_dedup_key(ad.headline, ad.description)
        if key in self.seen:
            return False
        self.seen.add(key)
        self.ads.append(ad)
        return True


def generate_ad(ad: AdDefinition, row: Mapping[str, Any]) -> GeneratedAd:
    """Interpolate a single ad definition against a data row."""
    return GeneratedAd(
        headline=interpolate_pattern(ad.headline, row),
        description=interpolate_pattern(ad.description, row),
        display_url=interpolate_pattern(ad.display_url, row) if ad.display_url else None,
        final_url=interpolate_pattern(ad.final_url, row) if ad.final_url else None
    )


def resolve(
    ad_groups: Sequence[AdGroupDefinition],
    campaign_name_pattern: str,
    rows: Sequence[Mapping[str, Any]],
    rows_skipped: int = 0
) -> HierarchyPreview:
    """
    Expand ad group templates against data rows.

    Args:
        ad_groups: Ad group definitions of the hierarchy
        campaign_name_pattern: Campaign name pattern
        rows: Data rows to expand against
        rows_skipped: Number of rows the caller dropped before resolving

    Returns:
        HierarchyPreview: Deduplicated tree and its statistics
    """
    rows = list(rows or [])
    if not rows:
        return HierarchyPreview(stats=HierarchyStats(rows_skipped=rows_skipped))

    if not ad_groups:
        return HierarchyPreview(stats=HierarchyStats(
            rows_processed=len(rows),
            rows_skipped=rows_skipped
        ))

    # campaign name -> ad group name -> bucket, both in first-seen order
    tree: Dict[str, Dict[str, _AdGroupBucket]] = {}
    duplicates = 0

    for row in rows:
        row = row or {}
        campaign_name = interpolate_pattern(campaign_name_pattern, row)
        campaign = tree.setdefault(campaign_name, {})

        for definition in ad_groups:
            ad_group_name = interpolate_pattern(definition.name_pattern, row)
            bucket = campaign.setdefault(ad_group_name, _AdGroupBucket())

            for ad in definition.ads:
                if not bucket.add(generate_ad(ad, row)):
                    duplicates += 1

    campaigns: List[GeneratedCampaign] = []
    total_ad_groups = 0
    total_ads = 0
    for campaign_name, groups in tree.items():
        generated_groups = [
            GeneratedAdGroup(ad_group_name=name, ads=bucket.ads)
            for name, bucket in groups.items()
        ]
        total_ad_groups += len(generated_groups)
        total_ads += sum(len(group.ads) for group in generated_groups)
        campaigns.append(GeneratedCampaign(campaign_name=campaign_name, ad_groups=generated_groups))

    logger.debug(
        f"Resolved {len(rows)} rows into {len(campaigns)} campaigns, "
        f"{total_ad_groups} ad groups, {total_ads} ads ({duplicates} duplicates dropped)"
    )

    return HierarchyPreview(
        campaigns=campaigns,
        stats=HierarchyStats(
            total_campaigns=len(campaigns),
            total_ad_groups=total_ad_groups,
            total_ads=total_ads,
            rows_processed=len(rows),
            rows_skipped=rows_skipped
        )
    )


def resolve_config(
    campaign_config: CampaignConfig,
    hierarchy_config: HierarchyConfig,
    rows: Sequence[Mapping[str, Any]],
    rows_skipped: int = 0
) -> HierarchyPreview:
    """Resolve using the configuration models directly."""
    return resolve(
        hierarchy_config.ad_groups,
        campaign_config.name_pattern,
        rows,
        rows_skipped=rows_skipped
    )


def find_ad_group(
    preview: HierarchyPreview,
    campaign_name: str,
    ad_group_name: str
) -> Optional[GeneratedAdGroup]:
    """Look up a generated ad group by its (campaign, ad group) key."""
    for campaign in preview.campaigns:
        if campaign.campaign_name != campaign_name:
            continue
        for group in campaign.ad_groups:
            if group.ad_group_name == ad_group_name:
                return group
    return None


def ad_group_keys(preview: HierarchyPreview) -> List[Tuple[str, str]]:
    """All (campaign name, ad group name) keys in tree order."""
    return [
        (campaign.campaign_name, group.ad_group_name)
        for campaign in preview.campaigns
        for group in campaign.ad_groups
    ]
