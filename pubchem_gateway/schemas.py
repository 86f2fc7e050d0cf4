"""
Schemas for gateway inputs and aggregated outputs.

Upstream payloads themselves are not modelled here; they are loosely typed
and decoded best-effort by pubchem_gateway.normalizer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

XrefValue = str | int | float


# =============================================================================
# Enums
# =============================================================================


class XrefCategory(str, Enum):
    """PubChem cross-reference types."""

    REGISTRY_ID = "RegistryID"
    RN = "RN"
    PUBMED_ID = "PubMedID"
    PATENT_ID = "PatentID"
    GENE_ID = "GeneID"
    PROTEIN_GI = "ProteinGI"
    TAXONOMY_ID = "TaxonomyID"


# =============================================================================
# Cross-Reference Schemas
# =============================================================================


class XrefQuery(BaseModel):
    """Validated input for a cross-reference aggregation."""

    cid: int = Field(..., ge=1, description="PubChem Compound ID")
    categories: list[XrefCategory] = Field(
        ...,
        min_length=1,
        description="Cross-reference types to retrieve, in display order",
    )
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1)

    model_config = {"frozen": True}

    @field_validator("categories")
    @classmethod
    def _distinct_categories(cls, value: list[XrefCategory]) -> list[XrefCategory]:
        # First occurrence wins so the caller's order is kept
        return list(dict.fromkeys(value))


@dataclass(frozen=True)
class XrefRecord:
    """One cross-reference value tagged with its category."""

    category: XrefCategory
    value: XrefValue


class XrefGroup(BaseModel):
    """All values found for one category. The unit of pagination."""

    category: XrefCategory
    values: list[XrefValue]

    model_config = {"frozen": True}


class XrefPagination(BaseModel):
    """Pagination details over groups (not over individual values)."""

    current_page: int
    page_size: int
    total_groups: int
    total_pages: int

    model_config = {"frozen": True}


class AggregatedXrefResult(BaseModel):
    """One page of cross-reference groups for a compound."""

    cid: int
    groups: list[XrefGroup]
    pagination: XrefPagination

    model_config = {"frozen": True}


# =============================================================================
# Property Lookup Schemas
# =============================================================================


class PropertyQuery(BaseModel):
    """Validated input for a batch property lookup."""

    cids: list[int] = Field(..., min_length=1)
    properties: list[str] = Field(..., min_length=1)

    model_config = {"frozen": True}

    @field_validator("cids")
    @classmethod
    def _positive_cids(cls, value: list[int]) -> list[int]:
        if any(cid < 1 for cid in value):
            raise ValueError("CIDs must be positive integers")
        return value

    @field_validator("properties")
    @classmethod
    def _non_blank_properties(cls, value: list[str]) -> list[str]:
        names = [name.strip() for name in value]
        if not all(names):
            raise ValueError("Property names cannot be blank")
        return names


class CompoundPropertiesResult(BaseModel):
    """Property rows for every CID that returned data."""

    results: list[dict[str, Any]]
    missing_cids: list[int] = Field(default_factory=list)

    model_config = {"frozen": True}
