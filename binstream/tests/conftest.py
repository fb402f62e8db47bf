"""Unit tests configuration file."""

import pytest

from binstream.proto import GrowableBuffer, Permission


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def buffer():
    """An empty growable read/write buffer."""
    return GrowableBuffer()


@pytest.fixture
def reader():
    """Factory for read-only buffers over the given bytes."""

    def make(data):
        return GrowableBuffer(data, Permission.READ)

    return make
