from typing import Optional

def unknown_request_failure(path: str, message: Optional[str] = None) -> str:
    return f'Request to {path} failed: {message or "no response from backend"}'

def malformed_response_body(path: str, message: Optional[str] = None) -> str:
    return "\n".join((f'Malformed response body from {path}:', "Unknown cause. Possible data type mismatch or illogical values" if not message else message))

def catalog_loaded(path: str, size: int) -> str:
    return f'Loaded {size} catalog entries from {path}'

def authorization_denied(action: str, email: Optional[str] = None) -> str:
    return f'Denied {action} for {email or "unauthenticated user"}: no matching capability'

def login_succeeded(email: str) -> str:
    return f'Logged in as {email}'

def remote_rejection(action: str, message: str) -> str:
    return f'{action} rejected by backend: {message}'
