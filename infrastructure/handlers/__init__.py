"""Lambda handlers backing the Custom Resources.

Each module is deployed on its own as inline code, so modules must not
import one another.
"""

from pathlib import Path

HANDLERS_DIR = Path(__file__).parent


def handler_source(module_name: str) -> str:
  """Source code of a handler module, for Code.from_inline."""
  return (HANDLERS_DIR / f"{module_name}.py").read_text()
