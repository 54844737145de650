"""Composition root: wires adapters into the service layer."""

from .bootstrap import AppContainer, bootstrap

__all__ = ["AppContainer", "bootstrap"]
