from .console import ConsoleReporter, render_file_report

__all__ = ["ConsoleReporter", "render_file_report"]
