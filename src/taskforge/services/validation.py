"""服务层入参校验"""

from enum import StrEnum
from typing import TypeVar

from taskforge.core.errors import ValidationError

E = TypeVar("E", bound=StrEnum)


def require_enum(enum_type: type[E], value: object, field: str) -> E:
    """将调用方传入的值转换为枚举成员

    接受枚举成员或其字符串取值。

    Raises:
        ValidationError: 值为 None 或不是合法取值
    """
    if value is None:
        raise ValidationError(f"{field} is required")
    try:
        return enum_type(value)
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValidationError(f"invalid {field}: {value!r} (expected one of {allowed})") from e
