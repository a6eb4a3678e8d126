from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON клиента в camelCase, атрибуты в Python в snake_case"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def validate_iso_datetime(v: str) -> str:
    """Валидация формата ISO 8601"""
    try:
        datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError("must be an ISO 8601 date string")
    return v


IsoDateTime = Annotated[str, AfterValidator(validate_iso_datetime)]
