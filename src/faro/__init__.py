"""faro - unified dependency update checker for Go, Node.js and Python projects."""

__version__ = "0.4.0"
