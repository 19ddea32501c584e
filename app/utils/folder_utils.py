from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from app.schemas.folder import FolderTreeNode

ROOT_PATH = "/"
ROOT_NAME = "Filer"


def normalize_path(path: str) -> str:
    """Make a folder path absolute and slash-terminated.

    ``normalize_path(normalize_path(p)) == normalize_path(p)`` for every string.
    """
    if not path.startswith("/"):
        path = "/" + path
    if not path.endswith("/"):
        path = path + "/"
    return path


def path_segments(path: str) -> List[str]:
    return [part for part in path.split("/") if part]


def parent_path_of(path: str) -> str:
    parts = path_segments(path)
    if len(parts) > 1:
        return "/" + "/".join(parts[:-1]) + "/"
    return ROOT_PATH


def folder_name_of(path: str) -> str:
    parts = path_segments(path)
    return parts[-1] if parts else ""


def split_candidate_path(path: str) -> Tuple[str, str, str]:
    """Return (name, path, parent_path) for a suggested folder path.

    Empty segments collapse, so "a//b" becomes "/a/b/". A candidate with no
    segments at all maps to the root with an empty name.
    """
    parts = path_segments(path)
    if not parts:
        return "", ROOT_PATH, ROOT_PATH
    normalized = "/" + "/".join(parts) + "/"
    return parts[-1], normalized, parent_path_of(normalized)


def replace_path_prefix(path: str, old_prefix: str, new_prefix: str) -> str:
    if not path.startswith(old_prefix):
        return path
    return new_prefix + path[len(old_prefix):]


def count_documents_by_folder(folder_paths: Iterable[Optional[str]]) -> Dict[str, int]:
    return dict(Counter(path or ROOT_PATH for path in folder_paths))


def build_folder_tree(
    folders: Iterable[str], document_counts: Optional[Dict[str, int]] = None
) -> FolderTreeNode:
    """Build a nested tree rooted at ``/`` from a flat list of folder paths.

    Paths are sorted first so a parent is always inserted before its children.
    Ancestors missing from the list are created on the way down.
    """
    counts = document_counts or {}
    root = FolderTreeNode(
        name=ROOT_NAME, path=ROOT_PATH, children=[], file_count=counts.get(ROOT_PATH, 0)
    )

    for folder_path in sorted(set(folders)):
        if folder_path == ROOT_PATH:
            continue

        parts = path_segments(folder_path)
        current = root
        for index, part in enumerate(parts):
            child = next((c for c in current.children if c.name == part), None)
            if child is None:
                part_path = "/" + "/".join(parts[: index + 1]) + "/"
                child = FolderTreeNode(
                    name=part,
                    path=part_path,
                    children=[],
                    file_count=counts.get(part_path, 0),
                )
                current.children.append(child)
            current = child

    return root


def flatten_folder_tree(root: FolderTreeNode) -> List[str]:
    paths = []
    stack = [root]
    while stack:
        node = stack.pop()
        paths.append(node.path)
        stack.extend(node.children)
    return sorted(paths)
