"""Adapters exposing the rollup to command lines and the web interface."""
