"""gitqa - defect-fix and hotspot mining for git history."""

__version__ = "0.1.0"
