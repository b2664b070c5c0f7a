from src.Lib.Conversion.ConversionRequest import ConversionRequest, SigningCredential, SigningMode
from src.Lib.Conversion.DebugKeystore import DebugKeystore
from src.Lib.Conversion.Errors import BadRequest


class CredentialResolver:
    def __init__(self, debug_keystore: DebugKeystore):
        self.debug_keystore = debug_keystore

    def resolve(self, request: ConversionRequest) -> SigningCredential:
        if request.mode == SigningMode.DEBUG:
            return self.debug_keystore.credential()

        if request.mode != SigningMode.CUSTOM:
            raise BadRequest("mode", f"unsupported signing mode: {request.mode}")

        # checked in upload order so the first gap is the one reported
        for field, value in (
            ("keystore", request.keystore_path),
            ("alias", request.alias),
            ("ks_pass", request.ks_pass),
            ("key_pass", request.key_pass),
        ):
            if not value:
                raise BadRequest(field)

        return SigningCredential(
            keystore_path=request.keystore_path,
            alias=request.alias,
            ks_pass=request.ks_pass,
            key_pass=request.key_pass,
        )
