"""Voice2Note: hotkey dictation core turning recordings into formatted notes."""

__version__ = "0.1.0"
