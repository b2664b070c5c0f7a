import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from src.Lib.Conversion.ArchiveExtractor import ArchiveExtractor
from src.Lib.Conversion.ArtifactLocator import ArtifactLocator
from src.Lib.Conversion.BundleTool import BundleTool
from src.Lib.Conversion.ConversionRequest import SigningCredential
from src.Lib.Conversion.Errors import ConversionError, ToolExecutionFailure, WorkspaceError

SUCCESS_MESSAGE = "✅ Conversion successful!"


@dataclass(frozen=True)
class JobWorkspace:
    job_id: str
    archive_path: Path
    output_dir: Path

    @classmethod
    def allocate(cls, upload_dir) -> "JobWorkspace":
        root = Path(upload_dir)
        job_id = str(uuid.uuid4())
        return cls(
            job_id=job_id,
            archive_path=root / f"{job_id}.apks",
            output_dir=root / f"{job_id}_apk",
        )


@dataclass
class ConversionResult:
    job_id: Optional[str]
    ok: bool
    message: str
    apk_path: Optional[Path] = None
    link: Optional[str] = None
    error_kind: Optional[str] = None
    stdout: str = ""
    stderr: str = ""

    @classmethod
    def failed(cls, job_id: Optional[str], error: ConversionError) -> "ConversionResult":
        return cls(
            job_id=job_id,
            ok=False,
            message=error.message,
            error_kind=error.kind,
            stdout=getattr(error, "stdout", ""),
            stderr=getattr(error, "stderr", ""),
        )

    def to_response(self) -> dict:
        response = {"message": self.message}
        if self.ok and self.link:
            response["link"] = self.link
        return response


class ConversionJob:
    """
    Runs one bundle through bundletool and exposes the universal APK.

    Every request gets its own workspace under `upload_dir`:
    `<id>.apks` for the APK set and `<id>_apk/` for its extracted contents.
    """

    def __init__(
        self,
        upload_dir: str,
        bundletool: BundleTool,
        extractor: ArchiveExtractor,
        locator: ArtifactLocator,
    ):
        self.upload_dir = Path(upload_dir)
        self.bundletool = bundletool
        self.extractor = extractor
        self.locator = locator

        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def create_workspace(self) -> JobWorkspace:
        workspace = JobWorkspace.allocate(self.upload_dir)
        try:
            workspace.output_dir.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise WorkspaceError(f"could not create {workspace.output_dir}: {e}")
        return workspace

    def run(self, bundle_path: str, credential: SigningCredential) -> ConversionResult:
        job_id = None
        try:
            workspace = self.create_workspace()
            job_id = workspace.job_id
            print(f"[JOB {job_id}] Bundle: {bundle_path}")
            print(f"[JOB {job_id}] Output set: {workspace.archive_path}")

            self.bundletool.build_apks(bundle_path, str(workspace.archive_path), credential)
            print(f"[JOB {job_id}] bundletool finished, extracting {workspace.archive_path}")

            apk_path = self.extractor.extract(workspace.archive_path, workspace.output_dir)
            link = self.locator.link_for(apk_path)
            print(f"[JOB {job_id}] Universal APK ready: {link}")

            return ConversionResult(
                job_id=job_id,
                ok=True,
                message=SUCCESS_MESSAGE,
                apk_path=apk_path,
                link=link,
            )

        except ToolExecutionFailure as e:
            print(f"[JOB {job_id}] {e.kind}: {e.detail}\nSTDOUT:{e.stdout}\nSTDERR:{e.stderr}")
            return ConversionResult.failed(job_id, e)
        except ConversionError as e:
            print(f"[JOB {job_id}] {e.kind}: {e.detail}")
            return ConversionResult.failed(job_id, e)
