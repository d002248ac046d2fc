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


    Utility functions used in various places in the codebase.

"""
from typing import Optional

from pathlib import Path

from settings import Settings
from tree import RootStrippingNormalizer, TreeNormalizer

# Path which points to the root folder of the repository
GREYNIR_ROOT_DIR: Path = Path(__file__).parent.resolve()

# Other useful paths
CONFIG_DIR = GREYNIR_ROOT_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "Treebank.conf"

TESTS_DIR = GREYNIR_ROOT_DIR / "tests"


def default_normalizer(strip_root: Optional[bool] = None) -> Optional[TreeNormalizer]:
    """Return the tree normalizer to use, given an explicit strip_root
    flag or, if it is None, the STRIP_ROOT setting"""
    if strip_root is None:
        strip_root = Settings.STRIP_ROOT
    return RootStrippingNormalizer() if strip_root else None
