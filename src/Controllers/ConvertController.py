import os
import uuid

from flask import jsonify, request, send_file

from src.Lib.Conversion.ArtifactLocator import ArtifactLocator
from src.Lib.Conversion.ConversionJob import ConversionJob, ConversionResult
from src.Lib.Conversion.ConversionRequest import ConversionRequest
from src.Lib.Conversion.CredentialResolver import CredentialResolver
from src.Lib.Conversion.Errors import BadRequest, ConversionError, WorkspaceError
from src.Lib.Socket.emitter import emit_conversion


class ConvertController:
    def __init__(self, resolver: CredentialResolver, job: ConversionJob, locator: ArtifactLocator, upload_dir: str):
        self.resolver = resolver
        self.job = job
        self.locator = locator
        self.upload_dir = upload_dir

        os.makedirs(upload_dir, exist_ok=True)

    def _store_upload(self, storage, stored: list) -> str:
        # stored under a random name; the client filename is never used on disk
        path = os.path.join(self.upload_dir, uuid.uuid4().hex)
        stored.append(path)
        try:
            storage.save(path)
        except OSError as e:
            raise WorkspaceError(f"could not store upload {storage.filename!r}: {e}")
        return path

    @staticmethod
    def _discard(paths):
        for path in paths:
            try:
                if os.path.exists(path):
                    os.remove(path)
            except OSError as e:
                print(f"[CONVERT] Could not remove upload {path}: {e}")

    def convert(self):
        print("[CONVERT] Starting AAB conversion request")
        stored = []
        try:
            aab = request.files.get("aab")
            if aab is None or not aab.filename:
                raise BadRequest("aab")
            bundle_path = self._store_upload(aab, stored)

            keystore_path = None
            keystore = request.files.get("keystore")
            if keystore is not None and keystore.filename:
                keystore_path = self._store_upload(keystore, stored)

            conversion_request = ConversionRequest(
                bundle_path=bundle_path,
                mode=request.form.get("mode"),
                keystore_path=keystore_path,
                alias=request.form.get("alias"),
                ks_pass=request.form.get("ks_pass"),
                key_pass=request.form.get("key_pass"),
            )
            print(f"[CONVERT] Signing mode: {conversion_request.mode}")
            credential = self.resolver.resolve(conversion_request)
            result = self.job.run(conversion_request.bundle_path, credential)

        except BadRequest as e:
            print(f"[CONVERT] Rejected: {e.detail}")
            return jsonify({"message": e.message}), 400
        except ConversionError as e:
            print(f"[CONVERT] {e.kind}: {e.detail}")
            result = ConversionResult.failed(None, e)
        finally:
            self._discard(stored)

        response = result.to_response()
        # Socket.IO session id of the uploading client, if it has one open
        emit_conversion(result.job_id, result.ok, response, to=request.form.get("sid"))
        return jsonify(response), 200

    def download(self, filename):
        path = self.locator.resolve(filename)
        if path is None:
            return "File not found", 404
        print(f"[DOWNLOAD] Serving {path}")
        return send_file(path, as_attachment=True, download_name=path.name)
