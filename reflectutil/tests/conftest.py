"""Unit tests configuration file."""

import logging


def pytest_configure(config):
    """Disable verbose output and keep reflection debug logs quiet."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False
    logging.getLogger("reflectutil").setLevel(logging.INFO)
