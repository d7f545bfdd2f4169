from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialized as camelCase on the wire, accepts snake_case too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
