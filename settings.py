"""
    Greynir: Natural language processing for Icelandic

    Settings module

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


    This module reads and interprets the Treebank.conf configuration file.
    The file can include other files using the $include directive,
    making it easier to arrange configuration sections into logical
    and manageable pieces.

    Sections are identified like so: [ section_name ]

    Comments start with # signs.

    Sections are interpreted by section handlers.

"""

from typing import Dict, Union

import os
import threading

from reynir.basics import ConfigError, LineReader

from detokenizer import DEFAULT_RULES, DetokenizationOperation, operation_from_name


class DetokenizerRules:
    """Wrapper around the detokenization rules that are added
    or overridden in the configuration file"""

    DICT: Dict[str, DetokenizationOperation] = dict()

    @staticmethod
    def add(token: str, operation: DetokenizationOperation) -> None:
        """Add a rule for a token. Called from the config file handler."""
        DetokenizerRules.DICT[token] = operation

    @staticmethod
    def merged() -> Dict[str, DetokenizationOperation]:
        """Return the default rules, updated with the configured ones"""
        d = dict(DEFAULT_RULES)
        d.update(DetokenizerRules.DICT)
        return d


class Settings:
    """Global settings"""

    _lock = threading.Lock()
    loaded = False

    # Flask server host and port
    HOST = os.environ.get("TREEBANK_HOST", "localhost")
    PORT_STR = os.environ.get("TREEBANK_PORT", "5000")
    try:
        PORT = int(PORT_STR)
    except ValueError:
        raise ConfigError(
            "Invalid environment variable value: TREEBANK_PORT={0}".format(PORT_STR)
        )

    # Flask debug parameter
    DEBUG_STR = os.environ.get("TREEBANK_DEBUG", "0")
    try:
        DEBUG = bool(int(DEBUG_STR))
    except ValueError:
        raise ConfigError(
            "Invalid environment variable value: TREEBANK_DEBUG={0}".format(DEBUG_STR)
        )

    # Encoding of treebank files
    ENCODING = os.environ.get("TREEBANK_ENCODING", "utf-8")

    # Strip ROOT/TOP and anonymous wrapper nodes from trees returned by the API
    STRIP_ROOT = False

    # Maximum number of trees returned from a single API call
    MAX_TREES = 256

    # Maximum depth of a tree returned in JSON form from the API
    MAX_DEPTH = 200

    # Configuration settings from the Treebank.conf file
    @staticmethod
    def _handle_settings(s: str) -> None:
        """Handle config parameters in the settings section"""
        a = s.split("=", maxsplit=1)
        if len(a) != 2:
            raise ConfigError("Expected parameter=value, got '{0}'".format(s))
        par = a[0].strip().lower()
        sval = a[1].strip()
        val: Union[None, str, bool] = sval
        if sval.lower() == "none":
            val = None
        elif sval.lower() == "true":
            val = True
        elif sval.lower() == "false":
            val = False
        try:
            if par == "host":
                Settings.HOST = str(val)
            elif par == "port":
                Settings.PORT = int(val or 0)
            elif par == "debug":
                Settings.DEBUG = bool(val)
            elif par == "encoding":
                if not val or not isinstance(val, str):
                    raise ConfigError("Encoding must be a nonempty string")
                Settings.ENCODING = val
            elif par == "strip_root":
                Settings.STRIP_ROOT = bool(val)
            elif par == "max_trees":
                Settings.MAX_TREES = int(val or 0)
                if Settings.MAX_TREES <= 0:
                    raise ConfigError("max_trees must be a positive number")
            elif par == "max_depth":
                Settings.MAX_DEPTH = int(val or 0)
                if Settings.MAX_DEPTH <= 0:
                    raise ConfigError("max_depth must be a positive number")
            else:
                raise ConfigError("Unknown configuration parameter '{0}'".format(par))
        except ValueError:
            raise ConfigError("Invalid parameter value: {0}={1}".format(par, val))

    @staticmethod
    def _handle_detokenizer(s: str) -> None:
        """Handle token rules in the detokenizer section"""
        # Format: token = OPERATION
        a = s.rsplit("=", maxsplit=1)
        if len(a) != 2 or not a[0].strip():
            raise ConfigError("Expected token = OPERATION, got '{0}'".format(s))
        token = a[0].strip()
        try:
            op = operation_from_name(a[1])
        except ValueError as e:
            raise ConfigError(str(e))
        DetokenizerRules.add(token, op)

    @staticmethod
    def read(fname: str) -> None:
        """Read configuration file"""

        with Settings._lock:

            if Settings.loaded:
                return

            CONFIG_HANDLERS = {
                "settings": Settings._handle_settings,
                "detokenizer": Settings._handle_detokenizer,
            }
            handler = None  # Current section handler

            rdr = None
            try:
                rdr = LineReader(fname)
                for s in rdr.lines():
                    # Ignore comments
                    ix = s.find("#")
                    if ix >= 0:
                        s = s[0:ix]
                    s = s.strip()
                    if not s:
                        # Blank line: ignore
                        continue
                    if s[0] == "[" and s[-1] == "]":
                        # New section
                        section = s[1:-1].strip().lower()
                        if section in CONFIG_HANDLERS:
                            handler = CONFIG_HANDLERS[section]
                            continue
                        raise ConfigError("Unknown section name '{0}'".format(section))
                    if handler is None:
                        raise ConfigError("No handler for config line '{0}'".format(s))
                    # Call the correct handler depending on the section
                    try:
                        handler(s)
                    except ConfigError as e:
                        # Add file name and line number information to the exception
                        # if it's not already there
                        e.set_pos(rdr.fname(), rdr.line())
                        raise e

            except ConfigError as e:
                # Add file name and line number information to the exception
                # if it's not already there
                if rdr:
                    e.set_pos(rdr.fname(), rdr.line())
                raise e

            Settings.loaded = True
