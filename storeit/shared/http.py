from typing import Any, Optional

from storeit.shared.errors import StoreItError

def ok(data: Any = None, **extra):
    return {"ok": True, "data": data, **extra}

def fail(message: str, code: str = "bad_request", details: Optional[Any] = None):
    return {"ok": False, "error": {"code": code, "message": message, "details": details}}

def fail_from(exc: StoreItError):
    return fail(exc.message, code=exc.code, details=exc.details)
