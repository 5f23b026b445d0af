from pathlib import Path


class SkillAppError(Exception):
    """Base user-facing application error."""


class InvalidPathError(SkillAppError):
    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Invalid path ({reason}): {path}")


class NotFoundError(SkillAppError):
    pass


class ConflictError(SkillAppError):
    pass


class ValidationError(SkillAppError):
    pass


class NotEmptyError(SkillAppError):
    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Directory is not empty: {path}")


class SkillIOError(SkillAppError):
    pass


class ImportCancelledError(SkillAppError):
    def __init__(self, message: str = "Import cancelled") -> None:
        super().__init__(message)


class UnsavedChangesError(SkillAppError):
    def __init__(self, dirty: list[str]) -> None:
        self.dirty = dirty
        super().__init__(f"Unsaved changes in: {', '.join(dirty)}")


class SkillFileError(SkillAppError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class InvalidJsonFormatError(SkillFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(SkillFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")
