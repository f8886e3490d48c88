from clubportal.auth.password import hash_password, verify_password
from clubportal.auth.session import create_session_token, decode_session_token

__all__ = ["hash_password", "verify_password", "create_session_token", "decode_session_token"]
