"""Tai command line interface."""
