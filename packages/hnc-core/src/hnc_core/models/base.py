from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FabricModel(BaseModel):
    """Immutable base for fabric value types.

    Attributes are snake_case in Python; YAML/JSON documents and
    ``model_dump(by_alias=True)`` use the camelCase wire names
    (``uplinksPerLeaf``, ``guardType``, ``leafMaps``...).
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        protected_namespaces=(),
    )
