"""

    Greynir: Natural language processing for Icelandic

    Copyright (C) 2023 Miðeind ehf.

       This program is free software: you can redistribute it and/or modify
       it under the terms of the GNU General Public License as published by
       the Free Software Foundation, either version 3 of the License, or
       (at your option) any later version.
       This program is distributed in the hope that it will be useful,
       but WITHOUT ANY WARRANTY; without even the implied warranty of
       MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
       GNU General Public License for more details.

    You should have received a copy of the GNU General Public License
    along with this program.  If not, see http://www.gnu.org/licenses/.


    Tests for utility code in the Treebank repository.

"""

import os
import sys


# Shenanigans to enable Pytest to discover modules in the
# main workspace directory (the parent of /tests)
basepath, _ = os.path.split(os.path.realpath(__file__))
mainpath = os.path.join(basepath, "..")
if mainpath not in sys.path:
    sys.path.insert(0, mainpath)


def test_util(monkeypatch):
    """Test functions in utility.py."""

    from utility import (
        GREYNIR_ROOT_DIR,
        CONFIG_DIR,
        CONFIG_FILE,
        TESTS_DIR,
        default_normalizer,
    )
    from settings import Settings
    from tree import RootStrippingNormalizer

    # Test that the root directory is correctly structured
    assert (
        # utility should be in the root dir
        (GREYNIR_ROOT_DIR / "utility.py").is_file()
        and (GREYNIR_ROOT_DIR / "treereader.py").is_file()
        and CONFIG_DIR.is_dir()
        and CONFIG_FILE.is_file()
        and TESTS_DIR.is_dir()
        and (TESTS_DIR / "test_util.py").is_file()
    )

    assert isinstance(default_normalizer(True), RootStrippingNormalizer)
    assert default_normalizer(False) is None
    monkeypatch.setattr(Settings, "STRIP_ROOT", True)
    assert isinstance(default_normalizer(), RootStrippingNormalizer)
    assert default_normalizer(False) is None
    monkeypatch.setattr(Settings, "STRIP_ROOT", False)
    assert default_normalizer() is None
