#!/usr/bin/env python3
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
"""
Converts the C headers of the SDK to the YAML of the catalogue.
Only there to simplify the update of the data files when a new version of
the SDK is released: the output still needs to be reviewed, and the comments
added by hand.

Examples:
headergen.py --operations XAPIOpt.h
headergen.py --domain FilmSimulation FILMSIMULATION XAPIOpt.h
headergen.py --arities GFX50SII GFX50SII.h
"""

from collections import OrderedDict
import argparse
import fileinput
import logging
import re
import sys
import yaml

# look for lines like:
# #define SDK_FILMSIMULATION_PROVIA   1
DEFINE_RE = re.compile(r"^\s*#define\s+(\w+)\s+([-+\w]+)")
# and for enum entries like:
#     API_CODE_SetImageSize               = 0x2101,
ENUM_RE = re.compile(r"^\s*(\w+)\s*=\s*([-+\w]+)\s*,?")

API_CODE = "API_CODE_"
VENDOR = "SDK_"


class HexInt(int):
    """
    An int which is written in hexadecimal in the YAML
    """
    pass


class CatalogueDumper(yaml.SafeDumper):
    pass


def _represent_hex(dumper, value):
    return dumper.represent_scalar("tag:yaml.org,2002:int", "0x%04X" % (value,))


def _represent_odict(dumper, value):
    return dumper.represent_mapping("tag:yaml.org,2002:map", value.items())


CatalogueDumper.add_representer(HexInt, _represent_hex)
CatalogueDumper.add_representer(OrderedDict, _represent_odict)


def parse_number(s):
    """
    s (str): number as written in C (eg, "0x2101", "-9", "10")
    returns (int or None): None if it's not a number
    """
    m = re.match(r"^([-+]?)0[xX]([0-9a-fA-F]+)$", s)
    if m:
        v = HexInt(int(m.group(2), 16))
        return HexInt(-v) if m.group(1) == "-" else v
    if re.match(r"^[-+]?\d+$", s):
        return int(s, 10)
    return None


def _strip_comment(line):
    return line.split("//", 1)[0]


def read_defines(lines):
    """
    lines (iterable of str): content of a header
    returns (OrderedDict str -> int or str): name -> value, or the name of
      the constant it refers to
    """
    defines = OrderedDict()
    for line in lines:
        m = DEFINE_RE.match(_strip_comment(line))
        if not m:
            continue
        name, value = m.groups()
        num = parse_number(value)
        defines[name] = value if num is None else num
    return defines


def read_enum_entries(lines, prefix=""):
    """
    lines (iterable of str): content of a header
    prefix (str): only the entries starting with it are kept, and it's removed
    returns (OrderedDict str -> int or str): short name -> value, or the name of
      the constant it refers to
    """
    entries = OrderedDict()
    for line in lines:
        line = _strip_comment(line)
        if line.lstrip().startswith("#"):
            continue
        m = ENUM_RE.match(line)
        if not m or not m.group(1).startswith(prefix):
            continue
        name, value = m.groups()
        num = parse_number(value)
        entries[name[len(prefix):]] = value if num is None else num
    return entries


def convert_operations(entries):
    """
    entries (dict str -> int): the API_CODE_ entries, without the prefix
    returns (OrderedDict): the "operations" table of the catalogue
    """
    ops = OrderedDict()
    for name, code in entries.items():
        if not isinstance(code, int):
            logging.warning("Skipping operation %s with non numerical code %s", name, code)
            continue
        code = HexInt(code)
        if name.startswith(VENDOR):
            # Some operations are published with the vendor prefix
            ops[name[len(VENDOR):]] = OrderedDict((("code", code), ("aliases", [name])))
        else:
            ops[name] = code
    return ops


def convert_domain(defines, prefix, exclude=None, alt_prefixes=()):
    """
    Selects the constants of one domain
    defines (dict str -> int or str): as returned by read_defines()
    prefix (str): prefix of the domain, without "SDK_" (eg, "FILMSIMULATION")
    exclude (str or None): regex on the short names to skip (eg, to remove
      the constants of a domain whose prefix is longer)
    alt_prefixes (iterable of str): older prefixes of the same domain
    returns (OrderedDict str -> int or dict): the "values" of the domain
    """
    full = VENDOR + prefix + "_"
    refs = [VENDOR + p + "_" for p in (prefix,) + tuple(alt_prefixes)]
    values = OrderedDict()
    for name, value in defines.items():
        if not name.startswith(full):
            continue
        short = name[len(full):]
        if exclude and re.match(exclude, short):
            continue
        if isinstance(value, int):
            values[short] = value
            continue
        for r in refs:
            if value.startswith(r):
                values[short] = OrderedDict((("alias", value[len(r):]),))
                break
        else:
            logging.warning("Skipping %s which refers to unknown %s", name, value)
    return values


def convert_arities(entries):
    """
    entries (dict str -> int): the API_PARAM_ entries of a model, without prefix
    returns (OrderedDict str -> int): the "operations" table of a view
    """
    arities = OrderedDict()
    for name, n in entries.items():
        if not isinstance(n, int):
            logging.warning("Skipping arity of %s which is not a number: %s", name, n)
            continue
        arities[name] = int(n)
    return arities


def dump(data, stream=None):
    """
    Write the data as YAML, keeping the order and the codes in hexadecimal
    returns (str or None): the YAML, if no stream is given
    """
    return yaml.dump(data, stream, Dumper=CatalogueDumper, default_flow_style=False)


def main(args):
    """
    Handles the command line arguments
    args is the list of arguments passed
    return (int): value to return to the OS as program exit code
    """
    parser = argparse.ArgumentParser(description="Converts SDK headers to catalogue YAML")
    grp = parser.add_mutually_exclusive_group(required=True)
    grp.add_argument("--operations", dest="operations", action="store_true", default=False,
                     help="convert the API_CODE_ enumeration")
    grp.add_argument("--domain", dest="domain", nargs=2, metavar=("<name>", "<prefix>"),
                     help="convert the SDK_<prefix>_ defines to a domain")
    grp.add_argument("--arities", dest="arities", metavar="<model>",
                     help="convert the <model>_API_PARAM_ enumeration of a model header")
    parser.add_argument("--exclude", dest="exclude", metavar="<regex>",
                        help="short names to skip, for --domain")
    parser.add_argument("--alt-prefix", dest="altprefix", action="append", default=[],
                        metavar="<prefix>", help="older prefix of the domain, for --domain")
    parser.add_argument("headers", nargs="*", help="header files (default is stdin)")

    options = parser.parse_args(args[1:])

    try:
        lines = list(fileinput.input(options.headers or ("-",)))
    except IOError as exp:
        logging.error("%s", exp)
        return 129

    if options.operations:
        data = {"operations": convert_operations(read_enum_entries(lines, API_CODE))}
    elif options.domain:
        name, prefix = options.domain
        values = convert_domain(read_defines(lines), prefix, options.exclude, options.altprefix)
        if not values:
            logging.error("No constant found with prefix %s%s_", VENDOR, prefix)
            return 127
        desc = OrderedDict((("prefix", prefix), ("values", values)))
        data = {"domains": OrderedDict(((name, desc),))}
    else:
        entries = read_enum_entries(lines, options.arities + "_" + "API_PARAM_")
        data = OrderedDict((("model", options.arities),
                            ("operations", convert_arities(entries))))

    dump(data, sys.stdout)
    return 0


def run():
    """
    Entry point of the xsdk-headergen command
    """
    sys.exit(main(sys.argv))


if __name__ == '__main__':
    ret = main(sys.argv)
    exit(ret)

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
