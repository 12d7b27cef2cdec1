"""Crab Package Manager: one command surface over npm and cargo."""

__version__ = "0.4.0"
