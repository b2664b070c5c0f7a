import eventlet
eventlet.monkey_patch()
import os
import sys
from dotenv import load_dotenv
load_dotenv()

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from src.Server import create_app
from src.Lib.Conversion.BundleTool import BundleTool
from src.Lib.Conversion.DebugKeystore import DebugKeystore
from src.Lib.Conversion.Retention import WorkspaceJanitor

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Config from env
PORT = int(os.getenv("PORT", "3000"))
UPLOAD_DIR = os.getenv("CONVERT_UPLOAD_DIR", os.path.join(BASE_DIR, "uploads"))
BUNDLETOOL_JAR = os.getenv("CONVERT_BUNDLETOOL_JAR", os.path.join(BASE_DIR, "bundletool-all-1.18.1.jar"))
JAVA_CMD = os.getenv("JAVA_CMD", "java")
DEBUG_KEYSTORE = os.getenv("CONVERT_DEBUG_KEYSTORE", os.path.join(BASE_DIR, "debug.keystore"))
TOOL_TIMEOUT = int(os.getenv("CONVERT_TOOL_TIMEOUT", "600"))
RETENTION_HOURS = float(os.getenv("CONVERT_RETENTION_HOURS", "24"))
SWEEP_INTERVAL = int(os.getenv("CONVERT_SWEEP_INTERVAL", "600"))
MAX_UPLOAD_MB = int(os.getenv("CONVERT_MAX_UPLOAD_MB", "300"))

os.makedirs(UPLOAD_DIR, exist_ok=True)

debug_keystore = DebugKeystore(DEBUG_KEYSTORE, java_home=os.getenv("JAVA_HOME"))
if not debug_keystore.ensure():
    print("[KEYSTORE] Debug-mode conversions are disabled until debug.keystore exists")

bundletool = BundleTool(jar_path=BUNDLETOOL_JAR, java_cmd=JAVA_CMD, timeout=TOOL_TIMEOUT)

app, socketio = create_app(
    upload_dir=UPLOAD_DIR,
    bundletool=bundletool,
    debug_keystore=debug_keystore,
    max_upload_mb=MAX_UPLOAD_MB,
)

janitor = WorkspaceJanitor(UPLOAD_DIR, ttl_seconds=int(RETENTION_HOURS * 3600))

if __name__ == "__main__":
    if janitor.ttl_seconds > 0:
        socketio.start_background_task(janitor.run_forever, SWEEP_INTERVAL, socketio.sleep)
    print(f"Server running at http://localhost:{PORT}")
    socketio.run(app, host="0.0.0.0", port=PORT)
