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
# Command line interface to the catalogue: lookups of codes and values, and
# the consistency checker.

import argparse
import json
import logging
import os
import sys
import yaml

import xsdk
from xsdk import catalogue
from xsdk.catalogue import checker, names
from xsdk.util import config as xconfig

# Command line arguments which can have "--" omitted
ACTION_NAMES = ("list-views", "list-ops", "code", "value", "layout", "check", "diff",
                "export", "version", "help")

# Name to use for the base catalogue instead of a model
BASE_NAME = "base"


def ensure_output_encoding():
    """
    Make sure the output encoding supports unicode, even when piped
    """
    for stream in (sys.stdout, sys.stderr):
        current = getattr(stream, "encoding", None)
        if current and current.lower().replace("-", "") != "utf8" and hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding="utf-8")


def _plain(obj):
    """
    Converts the OrderedDicts to dicts, recursively, for the dumpers
    """
    if isinstance(obj, dict):
        return {k: _plain(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_plain(v) for v in obj]
    return obj


def print_data(data, machine):
    """
    Output structured data: YAML for humans, JSON for programs
    """
    if machine:
        print(json.dumps(_plain(data)))
    else:
        print(yaml.safe_dump(_plain(data), default_flow_style=False, sort_keys=False), end="")


def get_target(name, config):
    """
    Find the catalogue or the view
    name (str): "base", a model name, or the path to a view file
    returns (Catalogue or ModelView)
    raises LookupError: if there is no such model
    """
    if name.lower() == BASE_NAME:
        return catalogue.get_catalogue()
    if name.endswith(".yaml") and os.path.isfile(name):
        return catalogue.load_view(name)
    return catalogue.get_view(name, config)


def list_views(config, pretty=True):
    for m in catalogue.list_views(config):
        if pretty:
            view = catalogue.get_view(m, config)
            print("%s\t%s (%d operations)" % (m, view.label, len(view.operations())))
        else:
            print(m)


def list_operations(target, pretty=True):
    """
    Print the operations of the catalogue or of a view, in order
    """
    if isinstance(target, catalogue.Catalogue):
        for op in target.operations():
            if pretty:
                print("%-40s 0x%04X  %s" % (op.name, op.code, op.family.label))
            else:
                print("%s\t0x%04X" % (op.name, op.code))
        return

    for name, arity in target.arities().items():
        op = target.operation(name)
        code = "0x%04X" % op.code if op is not None else "-"
        if pretty:
            status = "%d parameters" % int(arity) if arity.supported else "unsupported"
            print("%-40s %-6s  %s" % (name, code, status))
        else:
            print("%s\t%s\t%d" % (name, code, int(arity)))


def print_code(target, opname, pretty=True):
    """
    raises CatalogueError: if the operation is not available
    """
    if isinstance(target, catalogue.Catalogue):
        code = target.operation_code(opname)
        print("0x%04X" % (code,))
        return

    code = target.code(opname)
    arity = target.arity(opname)
    if pretty:
        print("0x%04X (%d parameters)" % (code, int(arity)))
    else:
        print("0x%04X\t%d" % (code, int(arity)))


def print_value(target, domain, name):
    print("%d" % (target.enum_value(domain, name),))


def print_layout(target, name, pretty=True):
    layout = target.layout(name)
    if not pretty:
        print("%s\t%d" % (layout.name, layout.size))
        for f in layout.fields:
            print("%s\t%d\t%d\t%s\t%d" % (f.name, f.offset, f.width, f.fmt, f.count))
        return

    print("%s: %d bytes" % (layout.name, layout.size))
    for f in layout.fields:
        desc = "%s" % f.fmt if f.count == 1 else "%s[%d]" % (f.fmt, f.count)
        if f.minimum is not None or f.maximum is not None:
            desc += " in [%s, %s]" % (f.minimum, f.maximum)
        print("  @%-3d %-30s %s" % (f.offset, f.name, desc))


def run_check(targets, strict, machine):
    """
    targets (list of Catalogue or ModelView)
    returns (bool): True if no error found
    """
    reports = []
    for t in targets:
        if isinstance(t, catalogue.Catalogue):
            reports.append(checker.check_catalogue(t))
        else:
            reports.append(checker.check(t, strict))

    if machine:
        print_data([r.as_dict() for r in reports], machine)
    else:
        for r in reports:
            for f in r:
                print("%s: %s" % (r.target, f))
            print("%s: %d errors, %d warnings" % (r.target, len(r.errors), len(r.warnings)))

    return all(r.ok for r in reports)


def export_names(target, machine):
    if isinstance(target, catalogue.Catalogue):
        ns = names.base_namespace(target)
    else:
        ns = names.view_namespace(target)
    if machine:
        print_data(ns, machine)
    else:
        for n, v in ns.items():
            print("%s = %d" % (n, v))


def main(args):
    """
    Handles the command line arguments
    args is the list of arguments passed
    return (int): value to return to the OS as program exit code
    """

    # arguments handling
    parser = argparse.ArgumentParser(prog="xsdk-cli",
                                     description=xsdk.__fullname__)

    # argparse doesn't allow optional arguments without dash. So to support
    # action-like arguments, we add "--" on the fly.
    for i, arg in enumerate(args):
        if arg in ACTION_NAMES:
            args[i] = "--" + arg
            # Only do it on the first match, as a "safety" in case an argument
            # (eg, operation name) would be matching action too.
            break

    parser.add_argument('--version', dest="version", action='store_true',
                        help="show program's version number and exit")
    opt_grp = parser.add_argument_group('Options')
    opt_grp.add_argument("--log-level", dest="loglev", metavar="<level>", type=int,
                         default=None, help="set verbosity level (0-2, default = 0)")
    opt_grp.add_argument("--machine", dest="machine", action="store_true", default=False,
                         help="display in a machine-friendly way (i.e., no pretty printing)")
    opt_grp.add_argument("--config", dest="config", metavar="<file>", default=None,
                         help="configuration file (default is $%s or %s)" %
                         (xconfig.CONFIG_ENV, xconfig.CONFIG_FILE))
    opt_grp.add_argument("--view", "-v", dest="view", metavar="<model>", default=None,
                         help="model view to use (or a view file, or \"base\" for the "
                         "catalogue itself). Default is DEFAULT_VIEW of the configuration.")
    opt_grp.add_argument("--strict", dest="strict", action="store_true", default=False,
                         help="when checking, report the values only existing in a view as errors")
    act_grp = parser.add_argument_group('Catalogue lookups')
    act_grpe = act_grp.add_mutually_exclusive_group()
    act_grpe.add_argument("--list-views", dest="listviews", action="store_true", default=False,
                          help="list the models which have a view")
    act_grpe.add_argument("--list-ops", "-l", dest="listops", action="store_true", default=False,
                          help="list the operations of the view, with their arity")
    act_grpe.add_argument("--code", "-c", dest="code", metavar="<operation>",
                          help="show the code of an operation")
    act_grpe.add_argument("--value", dest="value", nargs=2, metavar=("<domain>", "<name>"),
                          help="show the encoding of an enumerated value")
    act_grpe.add_argument("--layout", dest="layout", metavar="<record>",
                          help="show the byte layout of a record")
    act_grpe.add_argument("--check", dest="check", action="store_true", default=False,
                          help="verify the catalogue and the views (exit code is 1 in case of error)")
    act_grpe.add_argument("--diff", dest="diff", nargs=2, metavar=("<left>", "<right>"),
                          help="compare two views (or \"base\")")
    act_grpe.add_argument("--export", dest="export", action="store_true", default=False,
                          help="list the public constant names of the view")

    # To allow printing unicode even with pipes
    ensure_output_encoding()

    options = parser.parse_args(args[1:])

    # Cannot use the internal feature, because it doesn't support multiline
    if options.version:
        print(xsdk.__fullname__ + " " + xsdk.__version__ + "\n" +
              xsdk.__copyright__ + "\n" +
              "Licensed under the " + xsdk.__license__)
        return 0

    # Set up logging before everything else
    loglev_names = [logging.WARNING, logging.INFO, logging.DEBUG]
    # change the log format to be more descriptive
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('%(asctime)s (%(module)s) %(levelname)s: %(message)s'))
    logging.getLogger().addHandler(handler)
    # The level of the configuration is only known once it's read
    loglev = options.loglev
    if loglev is not None and loglev < 0:
        logging.error("Log-level must be positive.")
        return 127
    logging.getLogger().setLevel(loglev_names[min(len(loglev_names) - 1, loglev or 0)])

    try:
        config = xconfig.get_config(options.config)
    except IOError as exp:
        logging.error("Failed to read configuration: %s", exp)
        return 129

    if loglev is None:
        try:
            loglev = max(0, int(config.get("LOGLEVEL", 0)))
        except ValueError:
            logging.warning("LOGLEVEL of the configuration is not a number")
            loglev = 0
        logging.getLogger().setLevel(loglev_names[min(len(loglev_names) - 1, loglev)])

    # anything to do?
    if not any((options.listviews, options.listops, options.code, options.value,
                options.layout, options.check, options.diff, options.export)):
        logging.error("No action specified.")
        return 127

    pretty = not options.machine
    view_name = options.view or config.get("DEFAULT_VIEW", BASE_NAME)

    try:
        if options.listviews:
            list_views(config, pretty)
        elif options.listops:
            list_operations(get_target(view_name, config), pretty)
        elif options.code is not None:
            print_code(get_target(view_name, config), options.code, pretty)
        elif options.value is not None:
            print_value(get_target(view_name, config), *options.value)
        elif options.layout is not None:
            print_layout(get_target(view_name, config), options.layout, pretty)
        elif options.check:
            if options.view:
                targets = [get_target(options.view, config)]
            else:
                targets = [catalogue.get_catalogue()]
                targets.extend(catalogue.get_view(m, config)
                               for m in catalogue.list_views(config))
            if not run_check(targets, options.strict, options.machine):
                return 1
        elif options.diff is not None:
            left, right = (get_target(n, config) for n in options.diff)
            print_data(checker.diff(left, right), options.machine)
        elif options.export:
            export_names(get_target(view_name, config), options.machine)
    except KeyboardInterrupt:
        logging.info("Interrupted before the end of the execution")
        return 1
    except (LookupError, ValueError) as exp:
        # Also the catalogue errors: unknown name or unsupported operation
        logging.error("%s", exp)
        return 127
    except (IOError, catalogue.ParseError, catalogue.SemanticError) as exp:
        logging.error("%s", exp)
        return 129
    except Exception:
        logging.exception("Unexpected error while performing action.")
        return 130

    return 0


def run():
    """
    Entry point of the xsdk-cli command
    """
    sys.exit(main(sys.argv))


if __name__ == '__main__':
    ret = main(sys.argv)
    exit(ret)

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
