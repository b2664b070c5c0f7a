from pathlib import Path
from typing import Optional


class ArtifactLocator:
    def __init__(self, upload_dir: str, route_prefix: str = "/download"):
        self.upload_dir = Path(upload_dir).resolve()
        self.route_prefix = route_prefix.rstrip("/")

    def link_for(self, apk_path) -> str:
        relative = Path(apk_path).resolve().relative_to(self.upload_dir)
        return f"{self.route_prefix}/{relative.as_posix()}"

    def resolve(self, filename: str) -> Optional[Path]:
        """Map a client-supplied download name to a file under the uploads root, or None."""
        if not filename:
            return None
        candidate = (self.upload_dir / filename).resolve()
        if self.upload_dir not in candidate.parents:
            return None
        if not candidate.is_file():
            return None
        return candidate
