from app.security.jwt import AccessTokenError, create_access_token, decode_access_token

__all__ = [
    "AccessTokenError",
    "create_access_token",
    "decode_access_token",
]
