"""Base model with common configuration."""

from pydantic import BaseModel as PydanticBaseModel


class BaseReviewModel(PydanticBaseModel):
    """Base model for all Keyword Reviewer models."""

    model_config = {
        # Use enum values instead of names
        "use_enum_values": True,
        # Allow population by field name
        "populate_by_name": True,
        # Report records never change once built
        "frozen": True,
    }
