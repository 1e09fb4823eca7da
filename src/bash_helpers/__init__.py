"""bash-helpers: everyday shell helpers as a single command-line tool."""

__version__ = "0.1.0"
