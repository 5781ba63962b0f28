"""Identification the client sends to the server."""

from chnative.binary import Encoder

CLIENT_NAME = "Python SQLDriver"

CLICK_HOUSE_REVISION = 54213
CLICK_HOUSE_DBMSVERSION_MAJOR = 1
CLICK_HOUSE_DBMSVERSION_MINOR = 1


def write(encoder: Encoder) -> None:
    """Encode the client name and version."""
    encoder.string(CLIENT_NAME)
    encoder.uvarint(CLICK_HOUSE_DBMSVERSION_MAJOR)
    encoder.uvarint(CLICK_HOUSE_DBMSVERSION_MINOR)
    encoder.uvarint(CLICK_HOUSE_REVISION)


def description() -> str:
    """Human-readable client name and version."""
    return (
        f"{CLIENT_NAME} {CLICK_HOUSE_DBMSVERSION_MAJOR}."
        f"{CLICK_HOUSE_DBMSVERSION_MINOR}.{CLICK_HOUSE_REVISION}"
    )