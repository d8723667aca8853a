"""Stagegraph CLI for replaying and inspecting workflow diagrams."""

from stagegraph.cli.main import main

__all__ = ["main"]
