import pytest
from hnc_core.models import FabricSpec, SwitchProfile


@pytest.fixture
def ds2000():
    """48 endpoint ports and 8 fabric ports."""
    return SwitchProfile.model_validate(
        {
            "modelId": "DS2000",
            "roles": ["leaf"],
            "ports": {"endpointAssignable": ["E1/1-48"], "fabricAssignable": ["E1/49-56"]},
        }
    )


@pytest.fixture
def ds3000():
    """32 fabric ports."""
    return SwitchProfile.model_validate(
        {
            "modelId": "DS3000",
            "roles": ["spine"],
            "ports": {"endpointAssignable": [], "fabricAssignable": ["E1/1-32"]},
        }
    )


@pytest.fixture
def catalog(ds2000, ds3000):
    return {"DS2000": ds2000, "DS3000": ds3000}


@pytest.fixture
def make_fabric():
    """Build a multi-class FabricSpec from (id, uplinksPerLeaf, endpoints) tuples."""

    def _make(*classes, **extra) -> FabricSpec:
        leaf_classes = [
            {"id": cid, "uplinksPerLeaf": uplinks, "endpointProfiles": [{"name": f"{cid}-eps", "count": endpoints}]}
            for cid, uplinks, endpoints in classes
        ]
        return FabricSpec.model_validate(
            {"name": "test-fabric", "spineModelId": "DS3000", "leafModelId": "DS2000", "leafClasses": leaf_classes, **extra}
        )

    return _make
