"""Tests for the main command-line entry point.

This module verifies that executing the `glyphwarp` package as a script
invokes the `fire` library with the `run` function.
"""

import runpy
from unittest.mock import patch

from glyphwarp.__main__ import main
from glyphwarp.run import run


@patch("fire.Fire")
def test_main(mock_fire):
    """Tests that the main function passes `run` to `fire.Fire`."""
    main()
    mock_fire.assert_called_once_with(run)


@patch("fire.Fire")
def test_main_entry_point(mock_fire):
    """Tests that `python -m glyphwarp` triggers the entry point."""
    runpy.run_module("glyphwarp.__main__", run_name="__main__")
    mock_fire.assert_called_with(run)
