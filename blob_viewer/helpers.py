import re
import stat
from datetime import datetime, timedelta, timezone

from .models import GitObject

DEFAULT_MODES = {"blob": "100644", "tree": "040000", "commit": "160000"}
GITLINK_MODE = 0o160000

AUTHOR_RE = re.compile(
    r"^(?P<name>.*?) <(?P<email>[^>]*)> (?P<timestamp>-?\d+)(?: (?P<offset>[+-]\d{4}))?$"
)


def load_object(obj: GitObject):
    raw = bytes(obj.data)
    null_index = raw.find(b'\0')
    if null_index == -1:
        raise ValueError(f"Object {obj.sha1} has no header")
    header = raw[:null_index].decode()
    obj_type, size = header.split(' ')
    body = raw[null_index+1:]
    if int(size) != len(body):
        raise ValueError(f"Object {obj.sha1} declares {size} bytes, holds {len(body)}")
    return obj_type, body


def parse_tree(body: bytes):
    entries = []
    for line in body.decode().splitlines():
        head, _, rest = line.partition(' ')
        if head.isdigit():
            mode = head
            kind, sha, name = rest.split(' ', 2)
        else:
            kind, sha, name = line.split(' ', 2)
            mode = DEFAULT_MODES.get(kind, "100644")
        entries.append({"type": kind, "sha": sha, "name": name, "mode": mode})
    return entries


def parse_author(author_line: str):
    """Split ``Name <email> <epoch> [+hhmm]`` into name, email and an aware datetime."""
    match = AUTHOR_RE.match(author_line)
    if not match:
        return {"name": author_line, "email": "", "timestamp": None}
    tz = timezone.utc
    offset = match.group("offset")
    if offset:
        sign = -1 if offset[0] == '-' else 1
        delta = timedelta(hours=int(offset[1:3]), minutes=int(offset[3:5]))
        tz = timezone(sign * delta)
    timestamp = datetime.fromtimestamp(int(match.group("timestamp")), tz=tz)
    return {"name": match.group("name"), "email": match.group("email"), "timestamp": timestamp}


def parse_commit(body: bytes):
    text = body.decode()
    header, _, message = text.partition("\n\n")
    info = {"message": message, "parents": []}
    for line in header.splitlines():
        if line.startswith("tree "):
            info["tree"] = line.split(" ", 1)[1]
        elif line.startswith("parent "):
            info["parents"].append(line.split(" ", 1)[1])
        elif line.startswith("author "):
            info["author_line"] = line[7:]
            info["author"] = parse_author(info["author_line"])
    if "tree" not in info:
        raise ValueError("Commit has no tree")
    return info


def permission_string(mode: str) -> str:
    """Render a git tree mode the way ``ls -l`` does, e.g. ``100644`` -> ``-rw-r--r--``."""
    value = int(mode, 8)
    if value == GITLINK_MODE:
        return "m---------"
    return stat.filemode(value)
