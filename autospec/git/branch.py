"""Git repository and branch queries."""

from pathlib import Path

from autospec.git.runner import run_git, GitResult


def is_inside_repo(cwd: Path) -> bool:
    """Check if cwd is inside a git work tree."""
    result = run_git(["rev-parse", "--is-inside-work-tree"], cwd)
    return result.success and result.stdout.strip() == "true"


def get_current_branch(cwd: Path) -> str | None:
    """Get the current branch name, or None if detached HEAD or not a repo."""
    result = run_git(["branch", "--show-current"], cwd)
    if result.success:
        return result.stdout.strip() or None
    return None


def list_branches(cwd: Path) -> list[str]:
    """
    List local and remote-tracking branch names.

    Remote names are stripped of their remote prefix ("origin/003-x" -> "003-x")
    and duplicates are dropped. Returns empty list on git failure.
    """
    result = run_git(
        ["for-each-ref", "--format=%(refname)", "refs/heads", "refs/remotes"],
        cwd,
    )
    if not result.success:
        return []

    names = []
    seen = set()
    for line in result.stdout.splitlines():
        ref = line.strip()
        if ref.startswith("refs/heads/"):
            name = ref[len("refs/heads/"):]
        elif ref.startswith("refs/remotes/"):
            # refs/remotes/<remote>/<branch>
            parts = ref[len("refs/remotes/"):].split("/", 1)
            if len(parts) != 2 or parts[1] == "HEAD":
                continue
            name = parts[1]
        else:
            continue
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names


def create_branch(cwd: Path, branch: str) -> GitResult:
    """Create a branch from HEAD and switch to it."""
    return run_git(["checkout", "-b", branch], cwd)
