from typing import Annotated, Any, Optional

from pydantic import AnyUrl, BaseModel, UrlConstraints


# ============================================================
# Shared field types
# ============================================================

# Integer primary keys are 32-bit signed columns
DB_INT_MIN = -(2 ** 31)
DB_INT_MAX = 2 ** 31 - 1

# URLs end up in String(255) columns
Uri = Annotated[AnyUrl, UrlConstraints(max_length=255)]


# ============================================================
# Shared validator helpers
# ============================================================

def blank_to_none(value: Any) -> Any:
    """Treat empty or whitespace-only strings as an absent value."""
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def url_to_str(value: Optional[AnyUrl]) -> Optional[str]:
    return str(value) if value is not None else None


# ============================================================
# Shared response schemas
# ============================================================

class AuthorSummary(BaseModel):
    """Public view of a post or comment author."""

    id: int
    username: str
    email: str

    class Config:
        from_attributes = True
