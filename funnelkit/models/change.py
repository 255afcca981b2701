"""Non-structural change requests coming from the editing surface."""

from typing import Literal, Self

from pydantic import BaseModel, model_validator

from funnelkit.models.funnel_graph import Position

ChangeType = Literal["position", "select", "remove"]


class GraphChange(BaseModel):
    """A position, selection or removal update for one node or edge."""

    model_config = {"extra": "forbid"}

    type: ChangeType
    id: str
    position: Position | None = None
    selected: bool | None = None

    @model_validator(mode="after")
    def validate_payload(self) -> Self:
        """Each change type carries exactly the field it updates."""
        if self.type == "position" and self.position is None:
            raise ValueError("position change must contain 'position'")
        if self.type == "select" and self.selected is None:
            raise ValueError("select change must contain 'selected'")
        return self
