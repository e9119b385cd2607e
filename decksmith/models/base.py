from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ResultModel(BaseModel):
    """
    Base for values that appear in a DeckParseResult.

    Frozen after construction. Serialized with camelCase keys, which is
    the shape presentation layers bind to.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
