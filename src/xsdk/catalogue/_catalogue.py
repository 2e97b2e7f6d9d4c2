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
# The base catalogue: all the operations, value domains and record layouts
# common to the camera family.

from collections import OrderedDict
import logging

from ._core import UnknownEnumValue, UnknownLayout, SemanticError, normalize_domain, \
    error_name


def index_domains(domains, kind="domain"):
    """
    Build the lookup table of domains, by all their identifiers
    domains (iterable of Domain or BitsetDomain)
    returns (OrderedDict str -> Domain): normalized identifier -> domain
    raises SemanticError: if two domains share an identifier
    """
    index = OrderedDict()
    for d in domains:
        for k in sorted(d.keys()):
            if k in index and index[k] is not d:
                raise SemanticError("%s identifier %s is used by %s and %s" %
                                    (kind.capitalize(), k, index[k].name, d.name))
            index[k] = d
    return index


def find_domain(index, name, kind="domain"):
    try:
        return index[normalize_domain(name)]
    except KeyError:
        raise UnknownEnumValue("No %s called '%s'" % (kind, name))


class Catalogue(object):
    """
    Read-only registry of operation codes, enumerated values and layouts.
    It's normally created once by the loader, and shared by all the views.
    """

    def __init__(self, operations, domains, layouts, bitsets=()):
        """
        operations (OperationTable)
        domains (iterable of Domain)
        layouts (iterable of RecordLayout)
        bitsets (iterable of BitsetDomain)
        """
        self._ops = operations
        self._domains = tuple(domains)
        self._domain_index = index_domains(self._domains)
        self._bitsets = tuple(bitsets)
        self._bitset_index = index_domains(self._bitsets, "bitset")
        self._layouts = OrderedDict()
        for l in layouts:
            if normalize_domain(l.name) in self._layouts:
                raise SemanticError("Layout %s defined twice" % (l.name,))
            self._layouts[normalize_domain(l.name)] = l
        logging.debug("Catalogue has %d operations, %d domains, %d bitsets and %d layouts",
                      len(self._ops), len(self._domains), len(self._bitsets),
                      len(self._layouts))

    # Operations
    def operation(self, name):
        """
        returns (Operation)
        raises UnknownOperation
        """
        return self._ops.get(name)

    def operation_code(self, name):
        """
        name (str): canonical name or alias of the operation
        returns (int): 16-bit code
        raises UnknownOperation: if the name is not published
        """
        return self._ops.get(name).code

    def operation_by_code(self, code):
        return self._ops.by_code(code)

    def operations(self):
        """
        returns (tuple of Operation): ordered by family, then by code
        """
        return tuple(self._ops)

    def has_operation(self, name):
        return name in self._ops

    def property_group(self, prop):
        return self._ops.property_group(prop)

    def families(self):
        return self._ops.families

    def family_of(self, code):
        """
        code (int): operation code
        returns (Family): the family of the code, from its high byte
        raises LookupError: if the family is unknown
        """
        return self._ops.family(code >> 8)

    # Value domains
    def domain(self, name):
        """
        name (str): identifier of the domain (case and underscores don't matter)
        returns (Domain)
        raises UnknownEnumValue: if there is no such domain
        """
        return find_domain(self._domain_index, name)

    def domains(self):
        return self._domains

    def enum_value(self, domain, name):
        """
        domain (str): identifier of the domain, such as "FilmSimulation" or "FilmSim"
        name (str): name of the value, such as "PROVIA" or "5600"
        returns (int): the encoding of the value
        raises UnknownEnumValue: if the domain or the name is not published
        """
        return self.domain(domain).value(name)

    def bitset(self, name):
        return find_domain(self._bitset_index, name, "bitset")

    def bitsets(self):
        return self._bitsets

    # Records
    def layout(self, name):
        """
        returns (RecordLayout)
        raises UnknownLayout: if no layout has this name
        """
        try:
            return self._layouts[normalize_domain(name)]
        except KeyError:
            raise UnknownLayout("No record layout called '%s'" % (name,))

    def layouts(self):
        return tuple(self._layouts.values())

    @staticmethod
    def error_name(errno):
        return error_name(errno)

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
