"""Core domain models for plans, award candidates, and matches.

This module defines the data structures used throughout the application:
- Plan: data management plan supplied by the DMPHub
- Candidate: one award record returned by the NSF Award Search API
- PrincipalInvestigator: investigator entry on an aggregated match
- AggregatedMatch: the award a plan was matched to
- ProcessedPlan: tracking record for plans already scanned
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Plan(BaseModel):
    """Data management plan to be matched against awards.

    The authors field is free text of the form
    "Name | Organization, Name | Organization". Parsing happens in the
    scorer, not here, so the raw text is kept verbatim.
    """

    uri: str = Field(..., description="Stable unique identifier of the plan")
    title: Optional[str] = Field(None, description="Plan title, may carry a grant-type prefix")
    authors: Optional[str] = Field(None, description="Comma separated 'Name | Organization' entries")

    model_config = ConfigDict(frozen=True)

    @field_validator("uri")
    @classmethod
    def strip_uri(cls, v: str) -> str:
        """Strip whitespace from the uri."""
        if not v or not v.strip():
            raise ValueError("uri cannot be empty or whitespace-only")
        return v.strip()

    @property
    def doi(self) -> str:
        """DOI portion of the plan uri (the last two path segments).

        DMPHub uris look like http://host/api/v1/data_management_plans/10.80030/abcd-1234
        """
        parts = [p for p in self.uri.rstrip("/").split("/") if p]
        if len(parts) >= 2 and parts[-2].startswith("10."):
            return f"{parts[-2]}/{parts[-1]}"
        return parts[-1] if parts else self.uri

    def authors_display(self) -> str:
        """Render the authors list for humans ("Name from Organization")."""
        if not self.authors:
            return ""
        return self.authors.replace("|", " from ")


class Candidate(BaseModel):
    """Award record returned by the award search API.

    Field names follow the NSF wire format (camelCase) through aliases.
    A candidate without a title or PI last name is not eligible for scoring.
    """

    id: str = Field("", description="Award identifier")
    title: Optional[str] = Field(None, description="Award title")
    pi_first_name: Optional[str] = Field(None, alias="piFirstName")
    pi_last_name: Optional[str] = Field(None, alias="piLastName")
    awardee_name: Optional[str] = Field(None, alias="awardeeName", description="Performing organization")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v) -> str:
        """Accept numeric ids and treat null as empty."""
        if v is None:
            return ""
        return str(v)

    @property
    def is_eligible(self) -> bool:
        """Whether the candidate has the fields required for scoring."""
        return self.title is not None and self.pi_last_name is not None

    @property
    def pi_name(self) -> str:
        """PI display name as "<first> <last>"."""
        return f"{self.pi_first_name or ''} {self.pi_last_name or ''}"


class PrincipalInvestigator(BaseModel):
    """Investigator listed on a matched award."""

    name: str
    organization: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class AggregatedMatch(BaseModel):
    """Award matched to a plan.

    Co-investigator records sharing the winning title are folded into
    principal_investigators.
    """

    title: str = Field(..., description="Matched award title as returned by the API")
    principal_investigators: List[PrincipalInvestigator] = Field(default_factory=list)
    award_id: str = Field(..., description="Display URL of the award")

    model_config = ConfigDict(frozen=True)


class ProcessedPlan(BaseModel):
    """Record of a plan that has already been scanned."""

    plan_uri: str = Field(..., description="Plan uri")
    doi: Optional[str] = Field(None, description="Plan DOI")
    processed_at: datetime = Field(..., description="When the plan was scanned (UTC)")
    outcome: str = Field(..., description="matched, registered, no_match or no_title")
    award_id: Optional[str] = Field(None, description="Award display URL, when matched")

    @field_validator("processed_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
