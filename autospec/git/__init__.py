"""Git operations for autospec.

Return type conventions:
- Functions returning GitResult: Caller must check .success before using output.
  Examples: create_branch()
- Functions returning bool: True on success/condition met, False otherwise.
  Examples: is_inside_repo()
- Functions returning parsed values (str, Path, list): Return None/empty on failure.
  Examples: get_current_branch() -> None, list_branches() -> []
"""

from autospec.git.runner import GitResult, run_git
from autospec.git.branch import (
    is_inside_repo,
    get_current_branch,
    list_branches,
    create_branch,
)

__all__ = [
    "GitResult",
    "run_git",
    "is_inside_repo",
    "get_current_branch",
    "list_branches",
    "create_branch",
]
