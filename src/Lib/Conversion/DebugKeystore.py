import os
import subprocess
import sys
from pathlib import Path
from typing import Optional

from src.Lib.Conversion.ConversionRequest import SigningCredential
from src.Lib.Conversion.Errors import ConfigurationError

DEBUG_ALIAS = "debug"
DEBUG_PASSWORD = "android"
DEBUG_DNAME = "CN=Android Debug,O=Android,C=US"
DEFAULT_WINDOWS_JAVA_HOME = "C:\\Program Files\\Java\\jdk-latest"


class DebugKeystore:
    """
    Process-wide debug signing keystore.

    `ensure()` is run once at startup. It creates the keystore with keytool
    when the file is missing and records whether the keystore is usable.
    Debug-mode requests read `credential()` and fail fast when it is not.
    """

    def __init__(self, path: str, java_home: Optional[str] = None, timeout: int = 120):
        self.path = Path(path)
        self.java_home = java_home
        self.timeout = timeout
        self.ready = False

    def keytool_cmd(self) -> str:
        if sys.platform.startswith("win"):
            home = self.java_home or DEFAULT_WINDOWS_JAVA_HOME
            return os.path.join(home, "bin", "keytool")
        if self.java_home:
            candidate = os.path.join(self.java_home, "bin", "keytool")
            if os.path.exists(candidate):
                return candidate
        return "keytool"

    def generate_command(self) -> list:
        return [
            self.keytool_cmd(),
            "-genkeypair",
            "-v",
            "-keystore", str(self.path),
            "-storepass", DEBUG_PASSWORD,
            "-keypass", DEBUG_PASSWORD,
            "-alias", DEBUG_ALIAS,
            "-keyalg", "RSA",
            "-keysize", "2048",
            "-validity", "10000",
            "-dname", DEBUG_DNAME,
        ]

    def ensure(self) -> bool:
        if self.path.is_file():
            self.ready = True
            return self.ready

        print(f"[KEYSTORE] Creating {self.path} ...")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            result = subprocess.run(
                self.generate_command(),
                shell=False,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            print(f"[KEYSTORE] Failed to run keytool: {e}")
            self.ready = False
            return self.ready

        if result.returncode != 0 or not self.path.is_file():
            print(f"[KEYSTORE] Failed to create debug keystore\nSTDOUT:{result.stdout}\nSTDERR:{result.stderr}")
            self.ready = False
            return self.ready

        print(f"[KEYSTORE] Debug keystore created at {self.path}")
        self.ready = True
        return self.ready

    def credential(self) -> SigningCredential:
        if not self.ready or not self.path.is_file():
            raise ConfigurationError(f"debug keystore not available at {self.path}")
        return SigningCredential(
            keystore_path=str(self.path),
            alias=DEBUG_ALIAS,
            ks_pass=DEBUG_PASSWORD,
            key_pass=DEBUG_PASSWORD,
        )
