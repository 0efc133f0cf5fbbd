"""Canvas study assistant: LMS browsing plus a tool-calling study chat."""

__version__ = "0.1.0"
