import uuid


def new_id() -> str:
    """32-char hex id for users and clubs."""
    return uuid.uuid4().hex
