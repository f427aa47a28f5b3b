"""Tree node and coverage stats."""

from __future__ import annotations

from dataclasses import dataclass, field

ROOT_NAME = "."


@dataclass
class Node:
    name: str
    is_dir: bool
    chat_id: int | None = None
    analyzed: bool = False
    matched: bool = False
    visible: bool = True
    metadata: dict[str, object] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)

    def walk_files(self):
        """Yield every file node beneath (or at) this node, depth-first."""
        if not self.is_dir:
            yield self
            return
        for child in self.children:
            yield from child.walk_files()

    def to_dict(self) -> dict:
        data: dict = {"name": self.name, "is_dir": self.is_dir}
        if self.chat_id is not None:
            data["chat_id"] = self.chat_id
        data["analyzed"] = self.analyzed
        data["matched"] = self.matched
        data["visible"] = self.visible
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    def to_portable_dict(self) -> dict:
        data: dict = {"name": self.name, "is_dir": self.is_dir, "matched": self.matched}
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.children:
            data["children"] = [child.to_portable_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class TreeStats:
    total_files: int = 0
    analyzed_files: int = 0
    matched_files: int = 0

    @property
    def coverage_percent(self) -> float:
        if self.total_files == 0:
            return 0.0
        return self.analyzed_files / self.total_files * 100

    def to_dict(self) -> dict:
        return {
            "total_files": self.total_files,
            "analyzed_files": self.analyzed_files,
            "matched_files": self.matched_files,
            "coverage_percent": self.coverage_percent,
        }

    def to_portable_dict(self) -> dict:
        return {
            "total_files": self.total_files,
            "files_with_metadata": self.analyzed_files,
            "matched_files": self.matched_files,
            "metadata_coverage_percent": self.coverage_percent,
        }


__all__ = ["ROOT_NAME", "Node", "TreeStats"]
