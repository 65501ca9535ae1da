# hnc_core/models/sizing_policy.py
from typing import Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SizingPolicy(BaseModel):
    """Port budgets and limits used to size a fabric.

    The defaults describe the stock DS2000 leaf (48 ports) and DS3000 spine
    (32 fabric ports).
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True, protected_namespaces=())

    leaf_port_budget: int = Field(default=48, ge=1)
    spine_fabric_port_budget: int = Field(default=32, ge=1)
    max_oversubscription_ratio: float = Field(default=15.0, gt=0)

    # Accept both `model_port_budgets` and `model-port-budgets` in YAML
    model_port_budgets: Dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("model_port_budgets", "model-port-budgets"),
    )

    def leaf_ports_for(self, model_id: Optional[str]) -> int:
        if model_id is not None and model_id in self.model_port_budgets:
            return self.model_port_budgets[model_id]
        return self.leaf_port_budget

    def downlinks_for(self, model_id: Optional[str], uplinks_per_leaf: int) -> int:
        return self.leaf_ports_for(model_id) - uplinks_per_leaf
