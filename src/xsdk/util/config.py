# -*- coding: utf-8 -*-
'''
Created on 17 Oct 2026

@author: XSDK catalogue developers

Copyright © 2026 XSDK catalogue developers

This file is part of XSDK Catalogue.

XSDK Catalogue is free software: you can redistribute it and/or modify it under
the terms of the GNU General Public License version 2 as published by the Free
Software Foundation.

XSDK Catalogue is distributed in the hope that it will be useful, but WITHOUT ANY
WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS FOR A
PARTICULAR PURPOSE. See the GNU General Public License for more details.

You should have received a copy of the GNU General Public License along with
XSDK Catalogue. If not, see http://www.gnu.org/licenses/.
'''
# Configuration of the tools, read from a shell-like file:
#  VAR=value
# where value can refer to previous variables (or environment variables) as $VAR.

import logging
import os
import re
import shlex

CONFIG_FILE = "/etc/xsdk.conf"
CONFIG_ENV = "XSDK_CONFIG"

DEFAULT_CONFIG = {"LOGLEVEL": "0",  # 0 = warning, 1 = info, 2 = debug
                  "VIEW_PATH": "",  # extra directories with model view files, separated by ":"
                  "DEFAULT_VIEW": "GFX50SII",
                  }


def _add_var_config(config, var, content):
    """ Add one variable to the config, handling substitution

    Args:
        config: (dict) Configuration to add the found values to
        var: (str) The name of the variable
        content: (str) Value of the variable

    Returns:
        dict: The `config` dictionary is returned with the found values added

    """
    # variable substitution, in one pass: substituted text is not scanned again
    def substitute(m):
        subvar = m.group(1)
        # Earlier variables of the file have priority over the environment
        try:
            subcont = config[subvar]
        except KeyError:
            try:
                subcont = os.environ[subvar]
            except KeyError:
                logging.warning("Failed to find variable %s", subvar)
                subcont = ""
        return subcont

    content = re.sub(r"\$(\w+)", substitute, content)

    logging.debug("setting %s to %s", var, content)
    config[var] = content
    return config


def parse_config(configfile):
    """  Parse `configfile` and return a dictionary of its values

    Each line looks like:

        VIEW_PATH=$HOME/views:/opt/xsdk/views

    Args:
        configfile: (str) Path to the configuration file

    Returns:
        dict str->str: Config as name of variable -> value. Variables not in
          the file have their default value.

    """
    config = DEFAULT_CONFIG.copy()
    with open(configfile) as f:
        lines = shlex.split(f.read(), comments=True)
    for line in lines:
        tokens = line.split("=", 1)
        if len(tokens) != 2 or not tokens[0]:
            logging.warning("Can't parse '%s', skipping the line", line)
        else:
            _add_var_config(config, tokens[0], tokens[1])

    return config


def get_config(configfile=None):
    """
    Read the configuration, from the given file, the file of the environment
    variable XSDK_CONFIG, or /etc/xsdk.conf. A missing file is not an error:
    the default configuration is used.
    returns (dict str->str)
    """
    if configfile is None:
        configfile = os.environ.get(CONFIG_ENV, CONFIG_FILE)
    if not os.path.exists(configfile):
        logging.debug("No configuration file %s, using default config", configfile)
        return DEFAULT_CONFIG.copy()
    return parse_config(configfile)


def get_view_path(config):
    """
    returns (list of str): the directories listed in VIEW_PATH
    """
    return [p for p in config.get("VIEW_PATH", "").split(":") if p]
