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
# A model view: the projection of the catalogue which one camera model
# publishes, with the parameter count of each of its operations.

from collections import OrderedDict, namedtuple
import logging

from . import _arity
from ._catalogue import index_domains, find_domain
from ._core import UnknownOperation, UnsupportedInView, UnknownLayout, normalize_domain
from ._enums import Bitset

# What to hand to the transport: operation name, code, and the scalar slots
Request = namedtuple("Request", ["name", "code", "params"])


class ModelView(object):
    """
    Operations, values and layouts which one model supports.
    All the codes and encodings come from the base catalogue, the view only
    selects them, adds names, and gives the arity of each operation.
    """

    def __init__(self, model, catalogue, operations, aliases=None, codes=None,
                 domains=(), bitsets=(), layouts=(), label=None):
        """
        model (str): model identifier, such as "GFX50SII"
        catalogue (Catalogue): the base catalogue
        operations (iterable of (str, int or Arity)): published name -> arity,
          in the order of publication. -1 means declared but unsupported.
        aliases (dict str -> str): view operation name -> base operation name
        codes (dict str -> int): codes explicitly declared by the view. They are
          only kept to be verified, the codes used are the ones of the catalogue.
        domains (iterable of Domain): the value domains, restricted to the model
        bitsets (iterable of BitsetDomain): restricted bitsets
        layouts (iterable of str): names of the layouts the view re-exports
        raises UnknownOperation: if an alias refers to no operation of the catalogue
        """
        self.model = model
        self.label = label or model
        self.catalogue = catalogue
        self.aliases = dict(aliases or {})
        self.declared_codes = dict(codes or {})

        self._arities = OrderedDict()  # view name -> Arity
        self._ops = {}  # view name -> Operation of the catalogue (or None)
        for name, arity in operations:
            if name in self._arities:
                raise ValueError("Operation %s published twice in view %s" % (name, model))
            self._arities[name] = _arity.from_int(arity)
            if name in self.aliases:
                self._ops[name] = catalogue.operation(self.aliases[name])
            elif catalogue.has_operation(name):
                self._ops[name] = catalogue.operation(name)
            else:
                logging.info("View %s publishes %s, which has no code in the catalogue",
                             model, name)
                self._ops[name] = None

        # base op name -> view names, to accept any name of an operation
        self._by_base = {}
        for name, op in self._ops.items():
            if op is not None:
                self._by_base.setdefault(op.name, []).append(name)

        self._domains = tuple(domains)
        self._domain_index = index_domains(self._domains)
        self._bitsets = tuple(bitsets)
        self._bitset_index = index_domains(self._bitsets, "bitset")
        self._layouts = OrderedDict()
        for l in layouts:
            layout = catalogue.layout(l)
            self._layouts[normalize_domain(layout.name)] = layout

        self._order = self._sort_operations()

    def __repr__(self):
        return "ModelView(%s, %d operations)" % (self.model, len(self._arities))

    def _sort_operations(self):
        rank = {op.name: i for i, op in enumerate(self.catalogue.operations())}
        decl = {n: i for i, n in enumerate(self._arities)}

        def key(name):
            op = self._ops[name]
            if op is None:
                # Names without code go at the end, in declaration order
                return (1, 0, decl[name])
            return (0, rank[op.name], decl[name])

        return tuple(sorted(self._arities, key=key))

    def _resolve(self, name):
        """
        Find the view name of an operation
        name (str): view name, or any name of the operation in the catalogue
        returns (str): the name published in the view
        raises UnknownOperation: if the name is unknown everywhere
        raises UnsupportedInView: if the operation exists but is not published
        """
        if name in self._arities:
            return name
        if self.catalogue.has_operation(name):
            op = self.catalogue.operation(name)
            try:
                return self._by_base[op.name][0]
            except KeyError:
                raise UnsupportedInView("Operation %s is not part of the %s view" %
                                        (name, self.model))
        raise UnknownOperation("No operation called '%s'" % (name,))

    # Operations
    def operations(self):
        """
        returns (tuple of str): published operation names, ordered by family,
          then by code
        """
        return self._order

    def supported_operations(self):
        return tuple(n for n in self._order
                     if self._arities[n].supported and self._ops[n] is not None)

    def supports(self, op):
        """
        returns (bool): True if the operation is published and implemented
        """
        try:
            name = self._resolve(op)
        except (UnknownOperation, UnsupportedInView):
            return False
        return self._arities[name].supported and self._ops[name] is not None

    def arity(self, op):
        """
        returns (Arity): Supported(n), or UNSUPPORTED
        raises UnknownOperation: if the operation doesn't exist
        raises UnsupportedInView: if the operation is not published
        """
        return self._arities[self._resolve(op)]

    def arities(self):
        """
        returns (OrderedDict str -> Arity): all the published operations
        """
        return OrderedDict((n, self._arities[n]) for n in self._order)

    def operation(self, op):
        """
        returns (Operation or None): the operation of the catalogue, or None if
          the view publishes a name without code.
        """
        return self._ops[self._resolve(op)]

    def code(self, op):
        """
        returns (int): the code of the operation
        raises UnknownOperation: if the operation doesn't exist
        raises UnsupportedInView: if the operation is not published, or tagged unsupported
        """
        name = self._resolve(op)
        if not self._arities[name].supported:
            raise UnsupportedInView("Operation %s is declared unsupported by %s" %
                                    (name, self.model))
        base = self._ops[name]
        if base is None:
            raise UnknownOperation("Operation %s of view %s has no code" % (name, self.model))
        return base.code

    def prepare(self, op, *params):
        """
        Check a call before handing it to the transport
        op (str): operation name
        params: one value per slot. An encoded record (bytes) counts as one slot.
          A Bitset counts as one slot, unless the arity needs one slot per word.
        returns (Request)
        raises OperationUnsupported: if the operation is not implemented on the model
        raises ValueError: if the number of parameters doesn't match the arity
        """
        name = self._resolve(op)
        count = self._arities[name].require(name)
        code = self.code(name)

        slots = list(params)
        if len(slots) != count and any(isinstance(p, Bitset) for p in slots):
            expanded = []
            for p in slots:
                if isinstance(p, Bitset):
                    expanded.extend(p.words)
                else:
                    expanded.append(p)
            slots = expanded
        if len(slots) != count:
            raise ValueError("Operation %s takes %d parameters, got %d" %
                             (name, count, len(slots)))
        return Request(name, code, tuple(slots))

    # Values
    def domain(self, name):
        """
        returns (Domain): the domain restricted to the values the model accepts
        raises UnknownEnumValue: if the view doesn't publish the domain
        """
        return find_domain(self._domain_index, name)

    def domains(self):
        return self._domains

    def enum_value(self, domain, name):
        """
        returns (int): encoding of the value, which is the same as in the catalogue
        raises UnknownEnumValue: if the domain or the name is not published in the view
        """
        return self.domain(domain).value(name)

    def bitset(self, name):
        return find_domain(self._bitset_index, name, "bitset")

    def bitsets(self):
        return self._bitsets

    def extensions(self):
        """
        returns (list of EnumValue): values only existing in this view
        """
        return [e for d in self._domains for e in d.values() if e.extension]

    # Records
    def layout(self, name):
        """
        returns (RecordLayout)
        raises UnknownLayout: if the view doesn't re-export the layout
        """
        try:
            return self._layouts[normalize_domain(name)]
        except KeyError:
            if self._has_base_layout(name):
                raise UnknownLayout("Layout %s is not part of the %s view" % (name, self.model))
            raise UnknownLayout("No record layout called '%s'" % (name,))

    def _has_base_layout(self, name):
        try:
            self.catalogue.layout(name)
        except UnknownLayout:
            return False
        return True

    def layouts(self):
        return tuple(self._layouts.values())

    def namespace(self):
        """
        returns (OrderedDict str -> int): the public names of the model, such
          as GFX50SII_API_CODE_SetImageSize or GFX50SII_FILMSIMULATION_PROVIA
        """
        from xsdk.catalogue import names
        return names.view_namespace(self)

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
