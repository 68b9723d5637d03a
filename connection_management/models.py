"""
Cluster Routing Models

Value records describing where a request is routed: the region that owns a
key and the peer (store) that currently leads it.
"""

from pydantic import BaseModel, ConfigDict, Field


class RegionEpoch(BaseModel):
    """Version pair of a region; bumped on membership or range changes."""
    model_config = ConfigDict(frozen=True)

    conf_ver: int = Field(default=1, ge=0, description="Membership change version")
    version: int = Field(default=1, ge=0, description="Range change (split/merge) version")


class Peer(BaseModel):
    """A replica of a region hosted on one store."""
    model_config = ConfigDict(frozen=True)

    id: int = Field(default=0, ge=0, description="Peer identifier")
    store_id: int = Field(..., ge=0, description="Store hosting this peer")


class RpcContext(BaseModel):
    """
    Routing context attached to every key-addressed request.

    Attributes:
        region_id: Region that owns the routed key
        region_epoch: Epoch of that region at routing time
        peer: Leader peer the request must be sent to
    """
    model_config = ConfigDict(frozen=True)

    region_id: int = Field(..., ge=0, description="Region owning the routed key")
    region_epoch: RegionEpoch = Field(default_factory=RegionEpoch, description="Region epoch")
    peer: Peer = Field(..., description="Leader peer of the region")

    @property
    def store_id(self) -> int:
        """Store currently serving the region."""
        return self.peer.store_id
