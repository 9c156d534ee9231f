import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def iso(value):
    return value.isoformat() if value else None
