import time

from bson import ObjectId


def unix_now() -> int:
    """Current wall-clock time in whole seconds."""
    return int(time.time())


def new_document_id() -> str:
    return str(ObjectId())
