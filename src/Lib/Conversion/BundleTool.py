import os
import subprocess
import sys

from src.Lib.Conversion.ConversionRequest import SigningCredential
from src.Lib.Conversion.Errors import ToolExecutionFailure


class BundleTool:
    def __init__(self, jar_path, java_cmd="java", timeout=600):
        # Detect OS and normalize path
        if sys.platform.startswith("win"):
            self.jar_path = os.path.abspath(jar_path)
        else:
            self.jar_path = jar_path
        self.java_cmd = java_cmd
        self.timeout = timeout

    def run(self, command):
        try:
            result = subprocess.run(
                command,
                shell=False,       # credentials travel as argv entries, never through a shell
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise ToolExecutionFailure(
                f"bundletool timed out after {self.timeout}s",
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
            )
        except OSError as e:
            raise ToolExecutionFailure(f"could not launch {command[0]}: {e}")

        if result.returncode != 0:
            raise ToolExecutionFailure(
                f"bundletool exited with code {result.returncode}",
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    def build_apks_command(self, bundle_path, output_path, credential: SigningCredential):
        return [
            self.java_cmd, "-jar", self.jar_path,
            "build-apks",
            f"--bundle={bundle_path}",
            f"--output={output_path}",
            "--mode=universal",
            f"--ks={credential.keystore_path}",
            f"--ks-key-alias={credential.alias}",
            f"--ks-pass=pass:{credential.ks_pass}",
            f"--key-pass=pass:{credential.key_pass}",
        ]

    def build_apks(self, bundle_path, output_path, credential: SigningCredential):
        result = self.run(self.build_apks_command(bundle_path, output_path, credential))
        if not os.path.isfile(output_path):
            raise ToolExecutionFailure(
                f"bundletool reported success but {output_path} was not written",
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result


def _as_text(value):
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
