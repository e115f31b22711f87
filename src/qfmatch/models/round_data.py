"""Round data as loaded from the data provider.

Wire names are camelCase (``matchAmountUSD``, ``amountUSD``); attributes are
snake_case through aliases. Unknown wire fields are ignored and every model is
frozen, since loaded inputs are never mutated during a calculation.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

_WIRE = {"populate_by_name": True, "extra": "ignore", "frozen": True}


class Round(BaseModel):
    """A funding round with its matching pool."""

    model_config = _WIRE

    id: str
    match_amount_usd: Optional[float] = Field(None, alias="matchAmountUSD")
    minimum_amount: Optional[float] = Field(None, alias="minimumAmount")


class RawContribution(BaseModel):
    """A single vote exactly as recorded for the round."""

    model_config = _WIRE

    id: str
    voter: str
    project_id: str = Field(alias="projectId")
    application_id: str = Field(alias="applicationId")
    amount_usd: float = Field(alias="amountUSD")


# --- Applications: every metadata level may be missing ---


class ProjectInfo(BaseModel):
    model_config = _WIRE

    title: Optional[str] = None


class ApplicationBody(BaseModel):
    model_config = _WIRE

    project: Optional[ProjectInfo] = None
    recipient: Optional[str] = None


class ApplicationMetadata(BaseModel):
    model_config = _WIRE

    application: Optional[ApplicationBody] = None


class Application(BaseModel):
    """A project's application to the round."""

    model_config = _WIRE

    id: str
    project_id: str = Field(alias="projectId")
    votes: int = 0
    metadata: Optional[ApplicationMetadata] = None

    @property
    def project_name(self) -> Optional[str]:
        body = self.metadata.application if self.metadata else None
        if body is None or body.project is None:
            return None
        return body.project.title

    @property
    def payout_address(self) -> Optional[str]:
        body = self.metadata.application if self.metadata else None
        return body.recipient if body else None


# --- Identity verification ---


class IdentityEvidence(BaseModel):
    """Outcome of the identity check for one address."""

    model_config = _WIRE

    type: Optional[str] = None
    success: bool = False
    raw_score: Optional[Union[str, float]] = Field(None, alias="rawScore")
    threshold: Optional[Union[str, float]] = None


class IdentityScore(BaseModel):
    """Identity verification record keyed by contributor address."""

    model_config = _WIRE

    address: str
    evidence: Optional[IdentityEvidence] = None

    @field_validator("address")
    @classmethod
    def _lowercase_address(cls, v: str) -> str:
        return v.lower()
