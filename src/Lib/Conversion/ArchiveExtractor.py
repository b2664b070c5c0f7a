import zipfile
import zlib
from pathlib import Path

from src.Lib.Conversion.Errors import ArtifactNotFound, ExtractionFailure

UNIVERSAL_APK_NAME = "universal.apk"


class ArchiveExtractor:
    """
    Unpacks a bundletool `.apks` set into a job directory and finds the
    universal APK inside it.
    """

    def __init__(self, apk_name: str = UNIVERSAL_APK_NAME):
        self.apk_name = apk_name

    def extract(self, archive_path, dest_dir) -> Path:
        dest = Path(dest_dir).resolve()
        try:
            dest.mkdir(parents=True, exist_ok=True)
            with zipfile.ZipFile(archive_path, "r") as zf:
                members = zf.infolist()
                # validate every name before writing anything
                for member in members:
                    self._check_member(dest, member.filename)
                for member in members:
                    zf.extract(member, dest)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, OSError, RuntimeError, EOFError) as e:
            raise ExtractionFailure(f"could not extract {archive_path}: {e}")

        return self.locate(dest)

    def locate(self, dest_dir) -> Path:
        apk_path = Path(dest_dir).resolve() / self.apk_name
        if not apk_path.is_file():
            raise ArtifactNotFound(f"{self.apk_name} not found in {dest_dir}")
        return apk_path

    @staticmethod
    def _check_member(dest: Path, name: str):
        target = (dest / name).resolve()
        if target != dest and dest not in target.parents:
            raise ExtractionFailure(f"archive entry escapes the job directory: {name}")
