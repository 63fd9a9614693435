"""gitignore-tools: build and maintain .gitignore files from templates."""

__version__ = "2.0.0"
