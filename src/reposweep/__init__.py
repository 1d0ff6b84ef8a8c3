"""reposweep - clean build artifacts from project directories."""

__version__ = "0.3.0"
