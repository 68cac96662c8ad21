"""
Build errors.

Exception Hierarchy:
- BuildError (base)
  - MissingSourceError
  - CompileError
  - UnresolvedDependencyError
  - DependencyInstallError
"""

from pathlib import Path
from typing import Any, Dict, List, Optional


class BuildError(Exception):
    """Base exception for artifact build failures."""

    def __init__(self, message: str, handler: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.handler = handler

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "handler": self.handler,
        }


class MissingSourceError(BuildError):
    """Raised when the handler entry file does not exist."""

    def __init__(self, source: Path, handler: Optional[str] = None):
        super().__init__(f"Handler source not found: {source}", handler=handler)
        self.source = source


class CompileError(BuildError):
    """Raised when a bundled module does not compile."""

    def __init__(self, source: Path, error: SyntaxError, handler: Optional[str] = None):
        super().__init__(
            f"Failed to compile {source}: {error.msg} (line {error.lineno})",
            handler=handler,
        )
        self.source = source
        self.lineno = error.lineno


class UnresolvedDependencyError(BuildError):
    """Raised when an import of the handler cannot be resolved."""

    def __init__(self, modules: List[str], handler: Optional[str] = None):
        super().__init__(
            f"Unresolved imports: {', '.join(sorted(modules))}",
            handler=handler,
        )
        self.modules = sorted(modules)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["modules"] = self.modules
        return data


class DependencyInstallError(BuildError):
    """Raised when pip fails to install a handler's requirements."""

    def __init__(self, requirements: Path, returncode: int, output: str, handler: Optional[str] = None):
        super().__init__(
            f"Failed to install {requirements} (pip exited with {returncode})",
            handler=handler,
        )
        self.requirements = requirements
        self.returncode = returncode
        self.output = output

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["returncode"] = self.returncode
        data["output"] = self.output
        return data
