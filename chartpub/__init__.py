"""Publish changed Helm charts as GitHub releases and a chart repo index."""

__version__ = "0.1.0"
