"""Turn a web article into an embeddable interactive tool."""

__version__ = "0.1.0"
