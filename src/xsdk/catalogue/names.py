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
# Public constant names of the SDK, as written in the C headers, generated
# from the tables. The base catalogue publishes API_CODE_<operation> and
# SDK_<prefix>_<value>, a model view the same names, qualified by the model:
# <MODEL>_API_CODE_<operation>, <MODEL>_API_PARAM_<operation> and
# <MODEL>_<prefix>_<value>.

from collections import OrderedDict
import logging

from ._enums import EnumDomain, RangeDomain, FlagCategory

API_CODE = "API_CODE_"
API_PARAM = "API_PARAM_"
VENDOR = "SDK_"


def _value_name(qualifier, prefix, name):
    if prefix:
        return "%s%s_%s" % (qualifier, prefix, name)
    return "%s%s" % (qualifier, name)


def domain_names(domain, qualifier=VENDOR, prefixes=None):
    """
    Lists the public names of the values of a domain
    domain (Domain)
    qualifier (str): what comes before the prefix, "SDK_" or "<MODEL>_"
    prefixes (None or iterable of str): the prefixes to use, by default all
      the prefixes of the domain (the legacy spellings are also published)
    returns (list of (str, int)): public name, value
    """
    if prefixes is None:
        prefixes = domain.prefixes
    names = []
    for p in prefixes:
        if isinstance(domain, RangeDomain):
            names.append((_value_name(qualifier, p, "MIN"), domain.minimum))
            names.append((_value_name(qualifier, p, "MAX"), domain.maximum))
            if domain.step_declared:
                names.append((_value_name(qualifier, p, "STEP"), domain.step))
        elif isinstance(domain, (EnumDomain, FlagCategory)):
            for e in domain.values():
                names.append((_value_name(qualifier, p, e.name), e.value))
        else:
            raise TypeError("Unknown domain type %s" % (type(domain),))
    return names


def _add(ns, name, value):
    if name in ns and ns[name] != value:
        # Two domains sharing a prefix, for instance
        logging.warning("Public name %s is both %d and %d, keeping the first one",
                        name, ns[name], value)
        return
    ns[name] = value


def base_namespace(catalogue):
    """
    All the public names of the base catalogue
    catalogue (Catalogue)
    returns (OrderedDict str -> int): name -> value, operations first
    """
    ns = OrderedDict()
    for op in catalogue.operations():
        for n in (op.name,) + op.aliases:
            _add(ns, API_CODE + n, op.code)
    for d in catalogue.domains():
        for n, v in domain_names(d):
            _add(ns, n, v)
    return ns


def view_namespace(view):
    """
    All the public names of a model view, with every prefix of each domain
    (legacy spellings included). The operations without a code only get their
    API_PARAM.
    view (ModelView)
    returns (OrderedDict str -> int)
    """
    qualifier = view.model.upper() + "_"
    ns = OrderedDict()
    for name, arity in view.arities().items():
        op = view.operation(name)
        if op is not None:
            _add(ns, qualifier + API_CODE + name, op.code)
    for name, arity in view.arities().items():
        _add(ns, qualifier + API_PARAM + name, int(arity))
    for d in view.domains():
        for n, v in domain_names(d, qualifier):
            _add(ns, n, v)
    return ns

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
