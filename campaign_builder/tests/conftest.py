"""
Shared fixtures for campaign builder tests.
"""
import pytest
from typing import Any, Dict, List

from campaign_builder.hierarchy.models import (
    AdDefinition,
    AdGroupDefinition,
    CampaignConfig,
    DataSourceColumn,
    HierarchyConfig
)


@pytest.fixture
def sample_rows() -> List[Dict[str, Any]]:
    """Product rows as delivered by a data source."""
    return [
        {"brand": "Nike", "product": "Air Max", "price": "129.99", "url": "nike.com/air-max"},
        {"brand": "Nike", "product": "Jordan", "price": "189.00", "url": "nike.com/jordan"},
        {"brand": "Adidas", "product": "Ultraboost", "price": "180", "url": "adidas.com/ultraboost"},
    ]


@pytest.fixture
def columns() -> List[DataSourceColumn]:
    """Schema matching sample_rows."""
    return [
        DataSourceColumn(name="brand"),
        DataSourceColumn(name="product"),
        DataSourceColumn(name="price", type="number"),
        DataSourceColumn(name="url"),
    ]


@pytest.fixture
def campaign_config() -> CampaignConfig:
    return CampaignConfig(name_pattern="{brand} Shoes")


@pytest.fixture
def hierarchy_config() -> HierarchyConfig:
    """One ad group per product with a single ad."""
    return HierarchyConfig(ad_groups=[
        AdGroupDefinition(
            id="ag1",
            name_pattern="{product}",
            ads=[AdDefinition(
                id="ad1",
                headline="Buy {product}",
                description="Shop {brand} {product} from ${price}",
                display_url="{url}",
                final_url="https://{url}"
            )]
        )
    ])
