class ConversionError(Exception):
    """
    Base class for every failure the conversion pipeline can report.
    `kind` is the category name, `message` is what the client sees.
    """
    kind = "ConversionError"
    message = "❌ Conversion failed."

    def __init__(self, detail: str = "", message: str = None):
        super().__init__(detail or self.kind)
        self.detail = detail
        if message:
            self.message = message


class BadRequest(ConversionError):
    kind = "BadRequest"

    def __init__(self, field: str, detail: str = ""):
        self.field = field
        super().__init__(
            detail or f"missing required field: {field}",
            message=f"❌ Missing required field: {field}",
        )


class ConfigurationError(ConversionError):
    kind = "ConfigurationError"
    message = "❌ Debug signing is unavailable: debug.keystore was not created."


class WorkspaceError(ConversionError):
    kind = "WorkspaceError"
    message = "❌ Could not prepare a workspace for this conversion."


class ToolExecutionFailure(ConversionError):
    kind = "ToolExecutionFailure"
    message = "❌ Conversion failed. Check your inputs or keystore info."

    def __init__(self, detail: str = "", stdout: str = "", stderr: str = ""):
        super().__init__(detail)
        self.stdout = stdout or ""
        self.stderr = stderr or ""


class ExtractionFailure(ConversionError):
    kind = "ExtractionFailure"
    message = "❌ Failed to extract APK."


class ArtifactNotFound(ConversionError):
    kind = "ArtifactNotFound"
    message = "❌ APK not found in .apks bundle."
