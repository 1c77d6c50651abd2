"""Git operations module.

Usage:
    from versync.git import Repository, commit_operation

    repo = Repository(Path("/path/to/project"))
    repo.execute(commit_operation(repo.path, message="Set -dev suffix"))
"""

from versync.git.repository import (
    GitError,
    GitOperation,
    GitOperationName,
    Repository,
    StatusEntry,
    add_operation,
    commit_operation,
    parse_short_status,
    push_operation,
    push_tags_operation,
    status_operation,
    tag_operation,
)

__all__ = [
    "GitError",
    "GitOperation",
    "GitOperationName",
    "Repository",
    "StatusEntry",
    "add_operation",
    "commit_operation",
    "parse_short_status",
    "push_operation",
    "push_tags_operation",
    "status_operation",
    "tag_operation",
]
