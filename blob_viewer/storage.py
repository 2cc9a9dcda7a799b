import logging
from typing import Protocol, Tuple

from .errors import NotFound
from .helpers import load_object, parse_commit, parse_tree, permission_string
from .models import GitObject, Reference, Repository
from .renderer import BlobContent, BlobMetadata

logger = logging.getLogger(__name__)

REF_PREFIXES = ("", "refs/heads/", "refs/tags/")


class BlobSource(Protocol):
    def fetch_blob(self, repository_id: str, ref: str, path: str) -> Tuple[BlobMetadata, bytes]:
        """Return the metadata and raw bytes of ``path`` at ``ref``, or raise NotFound."""
        ...


class DatabaseBlobSource:
    """Resolves blobs from the objects and references stored in the database."""

    def _lookup(self, repo, sha, kind, ref, path):
        obj = GitObject.objects.filter(repo=repo, sha1=sha).first()
        if obj is None:
            raise NotFound(repo.name, ref, path, f"missing object {sha}")
        obj_type, body = load_object(obj)
        if obj_type != kind:
            raise NotFound(repo.name, ref, path, f"{sha} is a {obj_type}, not a {kind}")
        return body

    def _find_commit(self, repo, ref):
        for prefix in REF_PREFIXES:
            reference = Reference.objects.filter(repo=repo, name=prefix + ref).first()
            if reference is not None:
                logger.debug("Resolved %s to %s via %s", ref, reference.commit_hash, reference.name)
                return reference.commit_hash
        if GitObject.objects.filter(repo=repo, sha1=ref, type="commit").exists():
            return ref
        return None

    def resolve_commit(self, repo, ref, path=""):
        commit_sha = self._find_commit(repo, ref)
        if commit_sha is None:
            raise NotFound(repo.name, ref, path, "unknown ref")
        return commit_sha

    def split_ref(self, repository_id, rest):
        """Split ``<ref>/<path>`` where the ref itself may contain slashes.

        The longest leading run of segments that names a ref wins, and at
        least one segment is left for the path.
        """
        repo = Repository.objects.filter(name=repository_id).first()
        parts = [p for p in rest.strip("/").split("/") if p]
        if repo is None:
            raise NotFound(repository_id, parts[0] if parts else "", rest, "unknown repository")
        for cut in range(len(parts) - 1, 0, -1):
            ref = "/".join(parts[:cut])
            if self._find_commit(repo, ref) is not None:
                return ref, "/".join(parts[cut:])
        raise NotFound(repository_id, parts[0] if parts else "", rest, "unknown ref")

    def _resolve_tree_sha(self, repo, commit_sha, rel_path, ref, path):
        commit = parse_commit(self._lookup(repo, commit_sha, "commit", ref, path))

        current_tree_sha = commit["tree"]
        parts = [p for p in rel_path.strip("/").split("/") if p]
        for part in parts:
            entries = parse_tree(self._lookup(repo, current_tree_sha, "tree", ref, path))
            match = next(
                (e for e in entries if e["name"] == part and e["type"] == "tree"),
                None,
            )
            if not match:
                raise NotFound(repo.name, ref, path, f"directory '{rel_path}' not found")
            current_tree_sha = match["sha"]

        return current_tree_sha, commit

    def fetch_blob(self, repository_id, ref, path):
        path = path.strip("/")
        repo = Repository.objects.filter(name=repository_id).first()
        if repo is None:
            raise NotFound(repository_id, ref, path, "unknown repository")
        if not path:
            raise NotFound(repository_id, ref, path, "empty path")

        commit_sha = self.resolve_commit(repo, ref, path)
        parent_path, _, leaf = path.rpartition("/")
        tree_sha, commit = self._resolve_tree_sha(repo, commit_sha, parent_path, ref, path)

        entries = parse_tree(self._lookup(repo, tree_sha, "tree", ref, path))
        file_entry = next(
            (e for e in entries if e["name"] == leaf and e["type"] == "blob"),
            None,
        )
        if not file_entry:
            raise NotFound(repository_id, ref, path, "file not found")

        body = self._lookup(repo, file_entry["sha"], "blob", ref, path)
        author = commit.get("author", {"name": "", "timestamp": None})
        metadata = BlobMetadata(
            repository=repository_id,
            path=path,
            byte_size=len(body),
            permission_string=permission_string(file_entry["mode"]),
            commit_id=commit_sha,
            author=author["name"],
            commit_message=commit["message"],
            commit_timestamp=author["timestamp"],
        )
        return metadata, body


def load_blob(source: BlobSource, repository_id, ref, path, encoding="utf-8", sniff_bytes=8000):
    """Fetch a blob and decode it for rendering.

    NotFound from the source and Unsupported from decoding both propagate.
    """
    try:
        metadata, data = source.fetch_blob(repository_id, ref, path)
    except NotFound as exc:
        logger.info("Blob lookup failed: %s", exc)
        raise
    content = BlobContent.from_bytes(data, metadata.path, encoding=encoding, sniff_bytes=sniff_bytes)
    return metadata, content
