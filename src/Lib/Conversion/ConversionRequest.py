from dataclasses import dataclass
from typing import Optional


class SigningMode:
    DEBUG = "debug"
    CUSTOM = "custom"

    ALL = (DEBUG, CUSTOM)


@dataclass(frozen=True)
class SigningCredential:
    keystore_path: str
    alias: str
    ks_pass: str
    key_pass: str


class ConversionRequest:
    """
    Holds everything one upload asked for: the stored bundle path, the
    signing mode and the optional custom-signing fields.
    """
    def __init__(
        self,
        bundle_path: str,
        mode: Optional[str] = None,
        keystore_path: Optional[str] = None,
        alias: Optional[str] = None,
        ks_pass: Optional[str] = None,
        key_pass: Optional[str] = None,
    ):
        self.bundle_path = bundle_path
        self.mode = mode or SigningMode.DEBUG
        self.keystore_path = keystore_path
        self.alias = alias
        self.ks_pass = ks_pass
        self.key_pass = key_pass
