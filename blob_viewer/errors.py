class BlobViewerError(Exception):
    """Base class for blob viewer errors."""


class NotFound(BlobViewerError):
    """The repository, ref or path could not be resolved."""

    def __init__(self, repository, ref, path, detail=None):
        self.repository = repository
        self.ref = ref
        self.path = path
        message = f"No blob '{path}' at '{ref}' in repository '{repository}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class Unsupported(BlobViewerError):
    """The blob has no textual rendering (binary or undecodable)."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot render '{path}' as text: {reason}")
