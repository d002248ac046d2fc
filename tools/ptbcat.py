#!/usr/bin/env python3
"""

    Greynir: Natural language processing for Icelandic

    Treebank cat utility

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


    This utility reads trees in Penn Treebank format from files (or from
    standard input) and writes them to standard output in one of several
    formats.

"""

from typing import Callable, Dict, List, Optional, TextIO

import os
import sys
import json
import getopt
import logging

# Hack to make this Python program executable from the tools subdirectory
basepath, _ = os.path.split(os.path.realpath(__file__))
_TOOLS = os.sep + "tools"
if basepath.endswith(_TOOLS):
    basepath = basepath[0 : -len(_TOOLS)]
    sys.path.append(basepath)

from settings import Settings, ConfigError  # noqa
from tree import Tree  # noqa
from treereader import PennTreeReader, UnexpectedEndOfInput  # noqa
from utility import CONFIG_FILE, default_normalizer  # noqa


def _tagged(t: Tree) -> str:
    return " ".join(
        w if tag is None else "{0}/{1}".format(w, tag) for w, tag in t.tagged_words()
    )


FORMATTERS: Dict[str, Callable[[Tree], str]] = {
    "penn": lambda t: t.penn_string(),
    "pretty": lambda t: t.pretty() + "\n",
    "text": lambda t: t.text,
    "tagged": _tagged,
    "json": lambda t: json.dumps(t.to_dict(), ensure_ascii=False),
}


class Usage(Exception):
    def __init__(self, msg):
        self.msg = msg


__doc__ = """

    Greynir - Natural language processing for Icelandic

    Treebank cat utility

    Usage:
        python ptbcat.py [options] [file ...]

    Options:
        -h, --help: Show this help text
        -e enc, --encoding=enc: Encoding of the input files (default from config)
        -f fmt, --format=fmt: Output format: penn, pretty, text, tagged or json
        -l N, --limit=N: Output at most N trees per file
        -s, --strip: Strip ROOT/TOP and anonymous wrapper nodes

    If no files are given, trees are read from standard input.

"""


def cat_trees(
    stream: TextIO,
    out: TextIO,
    fmt: str = "penn",
    limit: int = 0,
    strip: Optional[bool] = None,
) -> int:
    """Read trees from the stream and write them to out in the
    given format. Returns the number of trees written."""
    formatter = FORMATTERS[fmt]
    cnt = 0
    with PennTreeReader(stream, tree_normalizer=default_normalizer(strip)) as rdr:
        for t in rdr:
            print(formatter(t), file=out)
            cnt += 1
            if limit and cnt >= limit:
                break
    return cnt


def main(argv: Optional[List[str]] = None) -> int:
    """Guido van Rossum's pattern for a Python main function"""

    if argv is None:
        argv = sys.argv
    try:
        try:
            opts, args = getopt.getopt(
                argv[1:], "he:f:l:s", ["help", "encoding=", "format=", "limit=", "strip"]
            )
        except getopt.error as msg:
            raise Usage(msg)

        encoding: Optional[str] = None
        fmt = "penn"
        limit = 0
        strip: Optional[bool] = None

        # Process options
        for o, a in opts:
            if o in ("-h", "--help"):
                print(__doc__)
                return 0
            elif o in ("-e", "--encoding"):
                if not a:
                    raise Usage("Encoding must be nonempty")
                encoding = a
            elif o in ("-f", "--format"):
                if a not in FORMATTERS:
                    raise Usage("Unknown output format '{0}'".format(a))
                fmt = a
            elif o in ("-l", "--limit"):
                try:
                    limit = int(a)
                except ValueError:
                    raise Usage("Limit must be an integer")
            elif o in ("-s", "--strip"):
                strip = True

        logging.basicConfig(
            format="%(asctime)s %(levelname)s:%(message)s", level=logging.WARNING
        )

        # Read the configuration settings file
        try:
            Settings.read(str(CONFIG_FILE))
        except ConfigError as e:
            print("Configuration error: {0}".format(e), file=sys.stderr)
            return 2

        encoding = encoding or Settings.ENCODING

        try:
            if not args:
                cat_trees(sys.stdin, sys.stdout, fmt, limit, strip)
            for fname in args:
                with open(fname, "r", encoding=encoding) as f:
                    cat_trees(f, sys.stdout, fmt, limit, strip)
        except UnexpectedEndOfInput as e:
            print("Incomplete tree: {0}".format(e), file=sys.stderr)
            return 2
        except (UnicodeDecodeError, LookupError) as e:
            print("Unable to decode input: {0}".format(e), file=sys.stderr)
            return 2
        except OSError as e:
            print("Unable to read input: {0}".format(e), file=sys.stderr)
            return 2

    except Usage as err:
        print(err.msg, file=sys.stderr)
        print("For help use --help", file=sys.stderr)
        return 2

    # Completed with no error
    return 0


if __name__ == "__main__":
    sys.exit(main())
