from typing import Optional

from fastapi import Depends, Header, Security
from fastapi.security import APIKeyHeader

from focusboard.constants import API_KEY, CRON_SECRET, TIMEZONE_HEADER, USER_ID_HEADER
from focusboard.exceptions import UnauthorizedException

# API key issued to the upstream gateway; the gateway forwards the user id
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str = Security(api_key_header)):
    """Verify API key for authentication"""
    if not api_key or api_key != API_KEY:
        raise UnauthorizedException("Invalid or missing API Key")
    return api_key


async def get_current_user_id(
    user_id: Optional[str] = Header(None, alias=USER_ID_HEADER),
    _: str = Depends(verify_api_key)
) -> str:
    """Authenticated user identity for the request"""
    if not user_id or not user_id.strip():
        raise UnauthorizedException(f"Missing {USER_ID_HEADER} header")
    return user_id.strip()


async def get_timezone_override(
    tz_name: Optional[str] = Header(None, alias=TIMEZONE_HEADER)
) -> Optional[str]:
    return tz_name or None


async def verify_cron_secret(authorization: Optional[str] = Header(None)):
    """Verify the bearer secret sent by the external cron trigger"""
    if not CRON_SECRET or authorization != f"Bearer {CRON_SECRET}":
        raise UnauthorizedException("Invalid or missing cron secret")
    return authorization
