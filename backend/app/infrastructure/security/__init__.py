from .identity import TokenPayload, create_access_token, decode_caller

__all__ = ["TokenPayload", "create_access_token", "decode_caller"]
