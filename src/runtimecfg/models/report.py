"""
Pydantic models for node-ip command output.

Used by `runtimecfg node-ip addresses --json` to report what node IP
selection sees on this host.
"""

from pydantic import BaseModel, Field

from runtimecfg.models.enums import CandidateSource


class CandidateReport(BaseModel):
    """A candidate address and the query that produced it."""

    address: str
    source: CandidateSource


class NodeIPReport(BaseModel):
    """
    Result of one node IP selection attempt.

    `chosen` is None when neither query found an address.
    """

    vips: list[str] = Field(default_factory=list, description="Parsed VIPs")
    vip_routed: list[CandidateReport] = Field(
        default_factory=list,
        description="Addresses routing toward the VIPs",
    )
    default_route: list[CandidateReport] = Field(
        default_factory=list,
        description="Addresses on the default route",
    )
    chosen: str | None = Field(None, description="Address node-ip show would print")
