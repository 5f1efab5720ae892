from typing import Any


def success(**data: Any) -> dict:
    return {"status": "success", "data": data}
