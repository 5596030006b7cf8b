"""The tests package for glyphwarp.

The tests are written using the `pytest` framework and cover font discovery,
layout, the distortion stages, the generator entry point and the command-line
scripts. Fonts are generated on the fly, see `conftest.py`.
"""
