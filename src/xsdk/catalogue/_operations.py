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
# Operation codes and the families they belong to

from collections import OrderedDict
import logging
import re

from ._core import SemanticError, UnknownOperation

KIND_CAP = "cap"
KIND_SET = "set"
KIND_GET = "get"
KIND_COMMAND = "command"

# prefix of the name -> kind
_KIND_PREFIXES = (("Cap", KIND_CAP), ("Set", KIND_SET), ("Get", KIND_GET))
_VENDOR_PREFIX = "SDK_"


class Family(object):
    """
    A group of operations, identified by the high byte of their code
    """

    def __init__(self, prefix, name, label=None):
        if not 0 <= prefix <= 0xFF:
            raise SemanticError("Family prefix 0x%X doesn't fit in a byte" % (prefix,))
        self.prefix = prefix
        self.name = name
        self.label = label or name

    def __repr__(self):
        return "Family(0x%02X, %r)" % (self.prefix, self.name)


def split_name(name):
    """
    Find the kind of operation and the property it acts on
    name (str): operation name, such as "SetImageSize" or "StartLiveView"
    returns (str, str): kind, property name
    """
    if name.startswith(_VENDOR_PREFIX):
        name = name[len(_VENDOR_PREFIX):]
    for prefix, kind in _KIND_PREFIXES:
        # "Setting..." is not a setter, the prefix must be followed by a capital
        if re.match(prefix + "[A-Z]", name):
            return kind, name[len(prefix):]
    # Commands (eg, ResetSetting, FormatMemoryCard) pair with their Cap query
    return KIND_COMMAND, name


class Operation(object):
    """
    One remote call, identified by its 16-bit code
    """

    def __init__(self, name, code, family, aliases=()):
        self.name = name
        self.code = code
        self.family = family
        self.kind, self.prop = split_name(name)
        self.aliases = tuple(aliases)

    def __repr__(self):
        return "Operation(%s, 0x%04X)" % (self.name, self.code)

    @property
    def family_prefix(self):
        return self.code >> 8


class OperationTable(object):
    """
    All the operations of the catalogue. Lookup is by canonical name, by any
    alias, or by code. Iteration is ordered by family, then by code.
    """

    def __init__(self, families, operations):
        """
        families (iterable of Family): in the order they should be listed
        operations (iterable of (str, int, iterable of str)): name, code, aliases
        raises SemanticError: if a code is duplicated, too large, or out of family
        """
        self._families = OrderedDict()
        for f in families:
            if f.prefix in self._families:
                raise SemanticError("Family 0x%02X declared twice" % (f.prefix,))
            self._families[f.prefix] = f

        self._by_name = {}
        self._by_code = {}
        ops = []
        for name, code, aliases in operations:
            if not isinstance(code, int) or not 0 <= code <= 0xFFFF:
                raise SemanticError("Operation %s has code %r which is not a 16-bit value" %
                                    (name, code))
            try:
                family = self._families[code >> 8]
            except KeyError:
                raise SemanticError("Operation %s has code 0x%04X in no known family" %
                                    (name, code))
            if code in self._by_code:
                raise SemanticError("Operation %s has the same code 0x%04X as %s" %
                                    (name, code, self._by_code[code].name))
            op = Operation(name, code, family, aliases)
            for n in (name,) + op.aliases:
                if n in self._by_name:
                    raise SemanticError("Operation name %s is used twice" % (n,))
                self._by_name[n] = op
            self._by_code[code] = op
            ops.append(op)

        order = {p: i for i, p in enumerate(self._families)}
        ops.sort(key=lambda o: (order[o.family_prefix], o.code))
        self._ops = tuple(ops)
        logging.debug("Loaded %d operations in %d families", len(self._ops), len(self._families))

    def __len__(self):
        return len(self._ops)

    def __iter__(self):
        return iter(self._ops)

    def __contains__(self, name):
        return name in self._by_name

    def get(self, name):
        """
        name (str): canonical name or alias
        returns (Operation)
        raises UnknownOperation: if no operation has this name
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownOperation("No operation called '%s'" % (name,))

    def by_code(self, code):
        try:
            return self._by_code[code]
        except KeyError:
            raise UnknownOperation("No operation has code 0x%04X" % (code,))

    @property
    def families(self):
        return tuple(self._families.values())

    def family(self, prefix):
        try:
            return self._families[prefix]
        except KeyError:
            raise LookupError("No family with prefix 0x%02X" % (prefix,))

    def property_group(self, prop):
        """
        returns (dict str -> Operation): kind -> operation acting on the property
        """
        return {op.kind: op for op in self._ops if op.prop == prop}

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
