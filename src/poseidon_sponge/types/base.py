"""Reusable, strict base models for the package."""

from pydantic import BaseModel, ConfigDict


class FrozenModel(BaseModel):
    """
    An immutable pydantic model that tolerates arbitrary field types.

    Parameter bundles hold matrices and field classes, so arbitrary types
    are allowed and checked with `isinstance`.
    """

    model_config = ConfigDict(
        frozen=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )


class StrictBaseModel(FrozenModel):
    """A strict, immutable pydantic base model."""

    model_config = FrozenModel.model_config | {
        "extra": "forbid",
        "strict": True,
    }
