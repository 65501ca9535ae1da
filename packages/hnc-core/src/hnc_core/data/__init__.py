from .fabric_spec import load_fabric_spec
from .profiles import load_switch_profile, load_switch_profiles
from .sizing_policy import load_sizing_policy_typed

__all__ = [
    "load_fabric_spec",
    "load_sizing_policy_typed",
    "load_switch_profile",
    "load_switch_profiles",
]
