import secrets
import string

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 8


def new_id() -> str:
    """
    Short opaque identifier for polls and options (36**8 space).
    Collisions are not checked.
    """
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
