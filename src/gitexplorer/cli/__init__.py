"""gitexplorer CLI: stage edits to a repository subtree and commit them."""

from ._helpers import main  # noqa: F401

# Import command modules to register Click commands with the main group.
from . import _basic, _auth  # noqa: F401
