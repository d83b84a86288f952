"""Education portal: course progress and evaluation service."""

__version__ = "0.1.0"
