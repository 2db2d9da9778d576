"""Short random identifiers for comments and replies."""
import secrets

ID_BYTES = 3


def new_id(nbytes: int = ID_BYTES) -> str:
    """
    Return *nbytes* of CSPRNG output rendered as lowercase hex.

    Errors from the OS random source propagate unchanged: an id drawn from
    a weaker source could collide and silently overwrite another record.
    """
    return secrets.token_hex(nbytes)
