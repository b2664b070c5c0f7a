from flask import Flask, jsonify
from flask_socketio import SocketIO
from werkzeug.exceptions import RequestEntityTooLarge

from src.Controllers.ConvertController import ConvertController
from src.Lib.Conversion.ArchiveExtractor import ArchiveExtractor
from src.Lib.Conversion.ArtifactLocator import ArtifactLocator
from src.Lib.Conversion.BundleTool import BundleTool
from src.Lib.Conversion.ConversionJob import ConversionJob
from src.Lib.Conversion.CredentialResolver import CredentialResolver
from src.Lib.Conversion.DebugKeystore import DebugKeystore
from src.Lib.Socket.emitter import init_socketio


def create_app(
    upload_dir: str,
    bundletool: BundleTool,
    debug_keystore: DebugKeystore,
    max_upload_mb: int = 300,
    async_mode: str = "eventlet",
):
    """Wire the conversion pipeline into a Flask app and its Socket.IO server."""
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = max_upload_mb * 1024 * 1024

    socketio = SocketIO(app, cors_allowed_origins="*", async_mode=async_mode)
    init_socketio(socketio)

    locator = ArtifactLocator(upload_dir)
    job = ConversionJob(
        upload_dir=upload_dir,
        bundletool=bundletool,
        extractor=ArchiveExtractor(),
        locator=locator,
    )
    controller = ConvertController(CredentialResolver(debug_keystore), job, locator, upload_dir)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        return jsonify({"message": f"❌ Upload exceeds the {max_upload_mb} MB limit."}), 413

    @app.route("/", methods=["GET"])
    def home():
        return "AAB to APK converter - POST /convert"

    @app.route("/convert", methods=["POST"])
    def convert():
        return controller.convert()

    @app.route("/download/<path:filename>", methods=["GET"])
    def download(filename):
        return controller.download(filename)

    return app, socketio
