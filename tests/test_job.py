"""Tests for the conversion job: workspace allocation, tool run, extraction."""

from __future__ import annotations

import threading
import uuid
from pathlib import Path

import pytest

from src.Lib.Conversion.ArchiveExtractor import ArchiveExtractor
from src.Lib.Conversion.ArtifactLocator import ArtifactLocator
from src.Lib.Conversion.ConversionJob import ConversionJob, JobWorkspace, SUCCESS_MESSAGE
from src.Lib.Conversion.ConversionRequest import SigningCredential
from src.Lib.Conversion.Errors import ToolExecutionFailure

from fakes import APK_BYTES, FakeBundleTool, corrupt_deflate, write_zip

CRED = SigningCredential("debug.keystore", "debug", "android", "android")


def _job(upload_dir: Path, tool: FakeBundleTool) -> ConversionJob:
    return ConversionJob(
        upload_dir=str(upload_dir),
        bundletool=tool,
        extractor=ArchiveExtractor(),
        locator=ArtifactLocator(str(upload_dir)),
    )


class TestWorkspace:
    def test_layout(self, upload_dir: Path) -> None:
        ws = JobWorkspace.allocate(upload_dir)
        uuid.UUID(ws.job_id)
        assert ws.archive_path == upload_dir / f"{ws.job_id}.apks"
        assert ws.output_dir == upload_dir / f"{ws.job_id}_apk"

    def test_ids_are_distinct_across_threads(self, upload_dir: Path) -> None:
        ids: list[str] = []
        lock = threading.Lock()

        def allocate() -> None:
            for _ in range(125):
                job_id = JobWorkspace.allocate(upload_dir).job_id
                with lock:
                    ids.append(job_id)

        threads = [threading.Thread(target=allocate) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(ids) == 1000
        assert len(set(ids)) == 1000

    def test_directory_creation_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "uploads"
        job = _job(blocker, FakeBundleTool())
        blocker.rmdir()
        blocker.write_bytes(b"not a directory")
        result = job.run("in.aab", CRED)
        assert not result.ok
        assert result.error_kind == "WorkspaceError"
        assert result.job_id is None


class TestRun:
    def test_success(self, upload_dir: Path) -> None:
        tool = FakeBundleTool()
        result = _job(upload_dir, tool).run("in.aab", CRED)
        assert result.ok
        assert result.message == SUCCESS_MESSAGE
        assert result.apk_path.is_file()
        assert result.apk_path.read_bytes() == APK_BYTES
        assert result.link == f"/download/{result.job_id}_apk/universal.apk"
        assert result.to_response() == {"message": SUCCESS_MESSAGE, "link": result.link}
        assert f"--output={upload_dir / (result.job_id + '.apks')}" in tool.commands[0]

    def test_each_run_gets_its_own_workspace(self, upload_dir: Path) -> None:
        job = _job(upload_dir, FakeBundleTool())
        first = job.run("in.aab", CRED)
        second = job.run("in.aab", CRED)
        assert first.job_id != second.job_id
        assert first.apk_path.parent != second.apk_path.parent

    def test_tool_failure(self, upload_dir: Path) -> None:
        result = _job(upload_dir, FakeBundleTool(expected_ks_pass="other")).run("in.aab", CRED)
        assert not result.ok
        assert result.error_kind == "ToolExecutionFailure"
        assert "password was incorrect" in result.stderr
        assert "link" not in result.to_response()
        assert list((upload_dir / f"{result.job_id}_apk").iterdir()) == []

    def test_split_archive_is_artifact_not_found(self, upload_dir: Path) -> None:
        tool = FakeBundleTool(entries={"toc.pb": b"toc", "splits/base-master.apk": b"base"})
        result = _job(upload_dir, tool).run("in.aab", CRED)
        assert result.error_kind == "ArtifactNotFound"
        assert result.message == "❌ APK not found in .apks bundle."

    def test_corrupt_archive_is_extraction_failure(self, upload_dir: Path) -> None:
        result = _job(upload_dir, FakeBundleTool(raw=b"garbage")).run("in.aab", CRED)
        assert result.error_kind == "ExtractionFailure"
        assert result.message == "❌ Failed to extract APK."
        assert sorted(p.name for p in upload_dir.iterdir()) == [
            f"{result.job_id}.apks",
            f"{result.job_id}_apk",
        ]

    def test_corrupt_entry_data_is_extraction_failure(self, upload_dir: Path, tmp_path: Path) -> None:
        archive = write_zip(tmp_path / "built.apks", {"toc.pb": b"toc", "universal.apk": APK_BYTES * 64})
        corrupt_deflate(archive, "universal.apk")
        result = _job(upload_dir, FakeBundleTool(raw=archive.read_bytes())).run("in.aab", CRED)
        assert not result.ok
        assert result.error_kind == "ExtractionFailure"
        assert "link" not in result.to_response()

    def test_launch_failure_is_reported(self, upload_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        tool = FakeBundleTool()

        def boom(command):
            raise ToolExecutionFailure("could not launch java: not found")

        monkeypatch.setattr(tool, "run", boom)
        result = _job(upload_dir, tool).run("in.aab", CRED)
        assert result.error_kind == "ToolExecutionFailure"
        assert result.job_id is not None
