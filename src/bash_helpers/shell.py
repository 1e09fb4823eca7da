"""Shell integration snippets.

``up`` has to change the directory of the calling shell, which a child
process cannot do. The snippet defines a shell function that ``cd``s into the
path printed by ``bash-helpers up``.
"""

from bash_helpers.exceptions import InvalidArgumentError

START_MARKER = "# >>> bash-helpers >>>"
END_MARKER = "# <<< bash-helpers <<<"

_POSIX_FUNCTION = """up() {
  local target
  target="$(bash-helpers up "${1:-1}")" && cd "$target"
}"""

_FISH_FUNCTION = """function up
  set -l levels (count $argv > /dev/null; and echo $argv[1]; or echo 1)
  set -l target (bash-helpers up $levels); and cd $target
end"""

SNIPPETS = {
    "bash": _POSIX_FUNCTION,
    "zsh": _POSIX_FUNCTION,
    "fish": _FISH_FUNCTION,
}


def render_shell_init(shell: str = "bash") -> str:
    """Build the shell config block for ``shell``.

    Args:
        shell: Target shell (bash, zsh or fish)

    Returns:
        The snippet wrapped in bash-helpers markers

    Raises:
        InvalidArgumentError: If the shell is not supported
    """
    body = SNIPPETS.get(shell.lower())
    if body is None:
        supported = ", ".join(sorted(SNIPPETS))
        raise InvalidArgumentError(f"Unsupported shell: {shell}. Supported shells: {supported}")
    return f"{START_MARKER}\n{body}\n{END_MARKER}"
