"""Derived value types, JSON serialization, dependency bags, a time-travel debugger and a to-do example."""

__version__ = "0.1.0"
__all__ = ["derive", "serialization", "deps", "debugger", "todo"]