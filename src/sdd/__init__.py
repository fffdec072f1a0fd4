"""Phase-gated feature workflow with explicit human approvals."""

__version__ = "0.1.0"
