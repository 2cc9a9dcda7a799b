import hashlib

import pytest

from blob_viewer.models import GitObject, Reference, Repository

LICENSE_TEXT = b"Apache License\nVersion 2.0, January 2004\nhttp://www.apache.org/licenses/"
COMMIT_TIMESTAMP = 1700000000


def store_object(repo, obj_type, body):
    full_data = f"{obj_type} {len(body)}\0".encode() + body
    sha1 = hashlib.sha1(full_data).hexdigest()
    GitObject.objects.get_or_create(repo=repo, sha1=sha1, defaults={"type": obj_type, "data": full_data})
    return sha1


@pytest.fixture
def sample_repo(db):
    """A repository with one commit touching text, empty, executable and binary files."""
    repo = Repository.objects.create(name="demo")
    blobs = {
        "LICENSE": store_object(repo, "blob", LICENSE_TEXT),
        "empty.txt": store_object(repo, "blob", b""),
        "logo.png": store_object(repo, "blob", b"\x89PNG\r\n\x1a\n\0\0\0\rIHDR"),
        "latin1.txt": store_object(repo, "blob", b"caf\xe9\n"),
        "run.sh": store_object(repo, "blob", b"#!/bin/sh\necho hi\n"),
        "quoted": store_object(repo, "blob", b"\0\1\2"),
    }
    readme = store_object(repo, "blob", b"# Docs\n\nHello <world>\n")
    docs_tree = store_object(repo, "tree", f"blob {readme} readme.md".encode())
    root_entries = [
        f"blob {blobs['LICENSE']} LICENSE",
        f"tree {docs_tree} docs",
        f"blob {blobs['empty.txt']} empty.txt",
        f"blob {blobs['logo.png']} logo.png",
        f"blob {blobs['latin1.txt']} latin1.txt",
        f"100755 blob {blobs['run.sh']} run.sh",
        f"blob {blobs['quoted']} a\"b.bin",
    ]
    root_tree = store_object(repo, "tree", "\n".join(root_entries).encode())
    commit_body = (
        f"tree {root_tree}\n"
        f"author Jane Doe <jane@example.com> {COMMIT_TIMESTAMP} +0100\n\n"
        "Add license\n\nWith a longer body."
    )
    commit_sha = store_object(repo, "commit", commit_body.encode())
    Reference.objects.create(repo=repo, name="refs/heads/main", commit_hash=commit_sha)
    Reference.objects.create(repo=repo, name="refs/tags/v1.0", commit_hash=commit_sha)
    repo.commit_sha = commit_sha
    return repo


@pytest.fixture
def feature_branch(sample_repo):
    """``refs/heads/feature/x`` next to a plain ``feature`` branch on the main commit."""
    repo = sample_repo
    blob = store_object(repo, "blob", b"feature work\n")
    tree = store_object(repo, "tree", f"blob {blob} f.txt".encode())
    commit_body = (
        f"tree {tree}\nparent {repo.commit_sha}\n"
        f"author Jane Doe <jane@example.com> {COMMIT_TIMESTAMP + 60} +0100\n\nStart feature"
    )
    commit_sha = store_object(repo, "commit", commit_body.encode())
    Reference.objects.create(repo=repo, name="refs/heads/feature/x", commit_hash=commit_sha)
    Reference.objects.create(repo=repo, name="refs/heads/feature", commit_hash=repo.commit_sha)
    repo.feature_sha = commit_sha
    return repo
