from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Currency and rates travel as JSON numbers, not strings
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _assume_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDateTime = Annotated[datetime, AfterValidator(_assume_utc)]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; both accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ApiResponse(CamelModel):
    """Envelope returned by every loan endpoint."""

    success: bool
    message: str
    data: Optional[Any] = None
    errors: Optional[list[str]] = None

    @classmethod
    def ok(cls, data: Any, message: str = "Operation successful") -> dict[str, Any]:
        return cls(success=True, message=message, data=data).to_json_dict()

    @classmethod
    def fail(cls, message: str, errors: Optional[list[str]] = None) -> dict[str, Any]:
        return cls(success=False, message=message, errors=errors).to_json_dict()
