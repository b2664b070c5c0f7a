import shutil
import time
from pathlib import Path


class WorkspaceJanitor:
    """
    Evicts job workspaces and leftover uploads once they are older than the
    retention window, so finished APKs stay downloadable for `ttl_seconds`.
    A ttl of 0 keeps everything.
    """

    def __init__(self, upload_dir: str, ttl_seconds: int):
        self.upload_dir = Path(upload_dir)
        self.ttl_seconds = ttl_seconds

    def expired(self, entry: Path, now: float) -> bool:
        try:
            return now - entry.stat().st_mtime > self.ttl_seconds
        except FileNotFoundError:
            return False

    def sweep(self, now: float = None) -> list:
        if self.ttl_seconds <= 0 or not self.upload_dir.is_dir():
            return []
        now = time.time() if now is None else now

        removed = []
        for entry in self.upload_dir.iterdir():
            if not self.expired(entry, now):
                continue
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
                removed.append(entry)
            except FileNotFoundError:
                continue
            except OSError as e:
                print(f"[JANITOR] Could not remove {entry}: {e}")

        if removed:
            print(f"[JANITOR] Removed {len(removed)} expired entries from {self.upload_dir}")
        return removed

    def run_forever(self, interval: int, sleep=time.sleep):
        while True:
            self.sweep()
            sleep(interval)
