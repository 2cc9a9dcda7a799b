"""Turn a blob and its commit metadata into a line-numbered view-model.

Nothing here touches Django or the database: the storage layer hands over
``BlobMetadata`` plus ``BlobContent`` and gets back a ``RenderedView`` that
a template can lay out.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .errors import Unsupported

NAV_KINDS = ("history", "blame", "raw")
NAV_LABELS = {"history": "History", "blame": "Blame", "raw": "Raw"}
SHORT_SHA_LENGTH = 7


@dataclass(frozen=True)
class BlobMetadata:
    repository: str
    path: str
    byte_size: int
    permission_string: str
    commit_id: str
    author: str
    commit_message: str
    commit_timestamp: Optional[datetime]

    def __post_init__(self):
        if self.byte_size < 0:
            raise ValueError("byte_size must be >= 0")


@dataclass(frozen=True)
class BlobContent:
    lines: tuple

    @classmethod
    def from_text(cls, text: str) -> "BlobContent":
        if not text:
            return cls(lines=())
        parts = text.split("\n")
        if text.endswith("\n"):
            parts.pop()
        return cls(lines=tuple(part[:-1] if part.endswith("\r") else part for part in parts))

    @classmethod
    def from_bytes(cls, data: bytes, path: str, encoding: str = "utf-8",
                   sniff_bytes: int = 8000) -> "BlobContent":
        """Decode ``data`` strictly, refusing binary payloads.

        A NUL byte within the first ``sniff_bytes`` marks the blob as binary,
        the same check git uses.
        """
        if b"\0" in data[:sniff_bytes]:
            raise Unsupported(path, "binary content")
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as exc:
            raise Unsupported(path, f"not valid {encoding}") from exc
        except LookupError as exc:
            raise Unsupported(path, f"unknown encoding {encoding}") from exc
        return cls.from_text(text)

    def __len__(self):
        return len(self.lines)


def anchor_for(number: int) -> str:
    if number < 1:
        raise ValueError(f"Line numbers start at 1, got {number}")
    return f"L{number}"


@dataclass(frozen=True)
class LineRow:
    number: int
    anchor: str
    text: str

    @property
    def href(self):
        return f"#{self.anchor}"


@dataclass(frozen=True)
class NavLink:
    kind: str
    label: str
    href: str


@dataclass(frozen=True)
class BlobHeader:
    path: str
    permission_string: str
    byte_size: int
    commit_id: str
    short_commit_id: str
    author: str
    commit_subject: str
    commit_timestamp: Optional[datetime]


@dataclass(frozen=True)
class RenderedView:
    header: BlobHeader
    rows: tuple
    nav_links: tuple

    @property
    def line_count(self):
        return len(self.rows)


LinkResolver = Callable[[str, BlobMetadata], str]


def default_link_resolver(kind: str, metadata: BlobMetadata) -> str:
    return f"/{metadata.repository}/{kind}/{metadata.commit_id}/{metadata.path}"


def build_header(metadata: BlobMetadata) -> BlobHeader:
    subject = metadata.commit_message.split("\n", 1)[0].strip()
    return BlobHeader(
        path=metadata.path,
        permission_string=metadata.permission_string,
        byte_size=metadata.byte_size,
        commit_id=metadata.commit_id,
        short_commit_id=metadata.commit_id[:SHORT_SHA_LENGTH],
        author=metadata.author,
        commit_subject=subject,
        commit_timestamp=metadata.commit_timestamp,
    )


def render(metadata: BlobMetadata, content: BlobContent,
           link_resolver: Optional[LinkResolver] = None) -> RenderedView:
    """Build the view-model for one blob.

    Row ``i`` carries line ``i`` of ``content`` under anchor ``L<i>``; rows
    are never reordered or dropped.
    """
    resolve = link_resolver or default_link_resolver
    rows = tuple(
        LineRow(number=number, anchor=anchor_for(number), text=text)
        for number, text in enumerate(content.lines, start=1)
    )
    nav_links = tuple(
        NavLink(kind=kind, label=NAV_LABELS[kind], href=resolve(kind, metadata))
        for kind in NAV_KINDS
    )
    return RenderedView(header=build_header(metadata), rows=rows, nav_links=nav_links)
