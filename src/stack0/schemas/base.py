"""Base model for request payloads sent to the API."""

from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Literal, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Environment = Literal["sandbox", "production"]

R = TypeVar("R", bound="ApiRequest")


class ApiRequest(BaseModel):
    """
    Typed request with a camelCase wire format.

    Fields are declared in snake_case and serialized with camelCase aliases.
    None fields are omitted from the body. Unknown keys are kept, so fields
    the server adds later can be sent before they are modeled.

    Update requests set ``send_explicit_nulls``: there, only fields the
    caller never set are omitted, and an explicit None is sent as ``null``
    to clear the value server-side.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    send_explicit_nulls: ClassVar[bool] = False

    @classmethod
    def coerce(cls: type[R], value: "R | Mapping[str, Any]") -> R:
        """Accept either an instance or a plain dict (snake_case or camelCase keys)."""
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)

    def to_body(self, exclude: Iterable[str] = ()) -> dict[str, Any]:
        """Serialize to the JSON body the API expects."""
        excluded = set(exclude) or None
        if self.send_explicit_nulls:
            return self.model_dump(
                mode="json", by_alias=True, exclude_unset=True, exclude=excluded
            )
        return self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude=excluded
        )
