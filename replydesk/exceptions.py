from fastapi import HTTPException


class NotFoundException(HTTPException):
    """A requested record (or the demo owner) does not exist."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=404, detail=detail)


def describe_validation_errors(errors) -> str:
    """Turn pydantic error dicts into one readable sentence."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts) or "Invalid request"
