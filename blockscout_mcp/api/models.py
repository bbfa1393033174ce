"""
Pydantic models for chain registry records.

The registry answers ``GET /api/chains/{chain_id}`` with
``{name, description, isTestnet, explorers: [{url}, ...]}``.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExplorerDescriptor(BaseModel):
    """One explorer deployment for a chain."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str = Field(..., description="Explorer base URL")


class ChainRecord(BaseModel):
    """
    Chain metadata as served by the registry.

    Attributes:
        name (str): Human-readable chain name.
        description (str): Free-form description.
        is_testnet (bool): Whether the chain is a test network.
        explorers (List[ExplorerDescriptor]): Explorer deployments, primary first.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str
    description: str = ""
    is_testnet: bool = Field(False, alias="isTestnet")
    explorers: List[ExplorerDescriptor] = Field(default_factory=list)

    @property
    def explorer_url(self) -> Optional[str]:
        """URL of the primary explorer, or None when the chain lists none."""
        if self.explorers:
            return self.explorers[0].url
        return None
