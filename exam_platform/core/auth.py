"""
Caller identity resolution

The caller is whoever the identity header names. Identities are opaque and only
compared for equality; nothing here verifies them.
"""
from fastapi import HTTPException
from starlette.requests import Request
from typing import Optional

from exam_platform.core.config import CALLER_HEADER


def get_caller(request: Request) -> Optional[str]:
    """Get the caller identity from the request header, if any"""
    caller = request.headers.get(CALLER_HEADER)
    if caller is None or not caller.strip():
        return None
    return caller


def require_caller(request: Request) -> str:
    """Dependency to require a caller identity"""
    caller = get_caller(request)
    if not caller:
        raise HTTPException(
            status_code=401,
            detail="Authentication required"
        )
    return caller
