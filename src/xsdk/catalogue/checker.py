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
# Verification of the tables, run when building a release: a model view must
# be a coherent projection of the base catalogue. The results are returned as
# findings with a machine-readable code, so that they can be compared between
# two runs.

from collections import OrderedDict
import logging

from ._catalogue import Catalogue
from ._core import UnknownEnumValue
from ._enums import RangeDomain
from ._operations import KIND_CAP, KIND_SET, KIND_GET, KIND_COMMAND, split_name

ERROR = "error"
WARNING = "warning"

# Above this, a parameter count is surely a typo
MAX_ARITY = 32


class Finding(object):
    """
    One problem found by the checker
    """

    def __init__(self, code, severity, subject, message):
        """
        code (str): machine-readable identifier, such as "code-mismatch"
        severity (ERROR or WARNING)
        subject (str): the operation, domain or layout concerned
        message (str): human-readable explanation
        """
        self.code = code
        self.severity = severity
        self.subject = subject
        self.message = message

    def __repr__(self):
        return "Finding(%s, %s, %s)" % (self.code, self.severity, self.subject)

    def __str__(self):
        return "%s: %s [%s] %s" % (self.severity, self.subject, self.code, self.message)

    def as_dict(self):
        return OrderedDict((("code", self.code), ("severity", self.severity),
                            ("subject", self.subject), ("message", self.message)))


class Report(object):
    """
    All the findings on one catalogue or view
    """

    def __init__(self, target):
        self.target = target
        self.findings = []

    def __len__(self):
        return len(self.findings)

    def __iter__(self):
        return iter(self.findings)

    def add(self, code, severity, subject, message):
        f = Finding(code, severity, subject, message)
        if severity == ERROR:
            logging.debug("Check of %s: %s", self.target, f)
        self.findings.append(f)
        return f

    def error(self, code, subject, message):
        return self.add(code, ERROR, subject, message)

    def warning(self, code, subject, message):
        return self.add(code, WARNING, subject, message)

    @property
    def errors(self):
        return [f for f in self.findings if f.severity == ERROR]

    @property
    def warnings(self):
        return [f for f in self.findings if f.severity == WARNING]

    @property
    def ok(self):
        """
        True if no finding blocks the release
        """
        return not self.errors

    def codes(self):
        """
        returns (set of str): the codes of all the findings
        """
        return {f.code for f in self.findings}

    def by_code(self, code):
        return [f for f in self.findings if f.code == code]

    def as_dict(self):
        return OrderedDict((("target", self.target),
                            ("ok", self.ok),
                            ("errors", len(self.errors)),
                            ("warnings", len(self.warnings)),
                            ("findings", [f.as_dict() for f in self.findings])))


def _check_layouts(report, layouts):
    for l in layouts:
        for code, msg in l.verify():
            report.error(code, l.name, msg)


def check_catalogue(catalogue):
    """
    Verify the base catalogue. Most of the rules are already enforced when
    loading, this double-checks the ones which can be broken by a catalogue
    built programmatically.
    catalogue (Catalogue)
    returns (Report)
    """
    report = Report("base")
    seen = {}
    for op in catalogue.operations():
        if op.code in seen:
            report.error("duplicate-code", op.name, "has code 0x%04X, like %s" %
                         (op.code, seen[op.code]))
        else:
            seen[op.code] = op.name

    for d in catalogue.domains():
        canonical = {}
        for e in d.values():
            if e.alias_of is not None or isinstance(d, RangeDomain):
                continue
            if e.value in canonical:
                report.error("value-mismatch", d.name, "values %s and %s have both encoding %d" %
                             (canonical[e.value], e.name, e.value))
            canonical[e.value] = e.name

    _check_layouts(report, catalogue.layouts())
    logging.info("Catalogue checked: %d errors, %d warnings",
                 len(report.errors), len(report.warnings))
    return report


def _check_codes(report, view):
    for name, arity in view.arities().items():
        op = view.operation(name)
        if op is None:
            if arity.supported:
                report.error("missing-operation", name,
                             "is supported but has no code in the catalogue")
            else:
                report.warning("missing-operation", name,
                               "is declared unsupported and has no code in the catalogue")
            continue
        if name in view.declared_codes and view.declared_codes[name] != op.code:
            report.error("code-mismatch", name, "is declared 0x%04X, but the catalogue has 0x%04X" %
                         (view.declared_codes[name], op.code))

    for name in view.declared_codes:
        if name not in view.arities():
            report.error("missing-operation", name, "has a code but is not published")


def _check_arities(report, view):
    for name, arity in view.arities().items():
        if not arity.supported:
            continue
        n = int(arity)
        kind, prop = split_name(name)
        if n > MAX_ARITY:
            report.error("bad-arity", name, "takes %d parameters" % (n,))
        elif kind == KIND_CAP and n < 1:
            report.error("bad-arity", name, "is a capability query without parameter")
        elif kind in (KIND_SET, KIND_GET) and n < 1:
            report.error("bad-arity", name, "is a property access without parameter")


def _group_properties(view):
    """
    returns (OrderedDict str -> dict str -> list of str): property -> kind -> names
    """
    groups = OrderedDict()
    for name in view.operations():
        op = view.operation(name)
        if op is not None:
            kind, prop = op.kind, op.prop
        else:
            kind, prop = split_name(name)
        if kind == KIND_COMMAND:
            continue
        groups.setdefault(prop, {}).setdefault(kind, []).append(name)
    return groups


def _check_triples(report, view):
    catalogue = view.catalogue
    for prop, kinds in _group_properties(view).items():
        members = [n for names in kinds.values() for n in names]
        supported = {n for n in members if view.arity(n).supported}
        if supported and len(supported) != len(members):
            report.error("triple-asymmetry", prop, "%s supported but %s not" %
                         (", ".join(sorted(supported)),
                          ", ".join(sorted(set(members) - supported))))

        # Compare the setter and the getter
        sets = [n for n in kinds.get(KIND_SET, []) if n in supported]
        gets = [n for n in kinds.get(KIND_GET, []) if n in supported]
        if sets and gets and int(view.arity(sets[0])) != int(view.arity(gets[0])):
            report.warning("bad-arity", prop, "%s takes %d parameters but %s takes %d" %
                           (sets[0], int(view.arity(sets[0])), gets[0], int(view.arity(gets[0]))))

        base = catalogue.property_group(prop)
        missing = [k for k in (KIND_CAP, KIND_SET, KIND_GET) if k in base and k not in kinds]
        if missing:
            report.warning("partial-triple", prop, "publishes no %s operation" %
                           ("/".join(missing),))


def _check_domains(report, view, strict):
    for d in view.domains():
        base = d.base
        if base is None:
            report.error("missing-value", d.name, "is not derived from the catalogue")
            continue
        if isinstance(d, RangeDomain):
            if d.minimum < base.minimum or d.maximum > base.maximum:
                report.error("value-mismatch", d.name, "range [%d, %d] is outside of [%d, %d]" %
                             (d.minimum, d.maximum, base.minimum, base.maximum))
            if d.step % base.step:
                report.error("value-mismatch", d.name, "step %d is not a multiple of %d" %
                             (d.step, base.step))
            continue

        for e in d.values():
            subject = "%s.%s" % (d.name, e.name)
            if e.extension:
                msg = "is encoded %d only in this view" % (e.value,)
                if strict:
                    report.error("view-extension", subject, msg)
                else:
                    report.warning("view-extension", subject, msg)
                continue
            try:
                be = base.entry(e.name)
            except UnknownEnumValue:
                if e.alias_of is None:
                    report.error("missing-value", subject, "is not in the catalogue")
                    continue
                # New name for a value of the catalogue
                try:
                    be = base.entry(e.alias_of)
                except UnknownEnumValue:
                    report.error("missing-value", subject, "is an alias of %s, which is not in "
                                 "the catalogue" % (e.alias_of,))
                    continue
            if be.value != e.value:
                report.error("value-mismatch", subject, "is encoded %d, but %d in the catalogue" %
                             (e.value, be.value))


def check(view, strict=False):
    """
    Verify a model view against its catalogue
    view (ModelView)
    strict (bool): if True, the values only existing in the view are errors
    returns (Report)
    """
    report = Report(view.model)
    _check_codes(report, view)
    _check_arities(report, view)
    _check_triples(report, view)
    _check_domains(report, view, strict)
    _check_layouts(report, view.layouts())
    logging.info("View %s checked: %d errors, %d warnings", view.model,
                 len(report.errors), len(report.warnings))
    return report


def _summary(target):
    """
    returns (str, OrderedDict, OrderedDict, list): label, operations
      (name -> (code or None, arity or None)), domains (name -> names),
      layouts names
    """
    if isinstance(target, Catalogue):
        ops = OrderedDict((op.name, (op.code, None)) for op in target.operations())
        label = "base"
    else:
        ops = OrderedDict()
        for name, arity in target.arities().items():
            op = target.operation(name)
            ops[name] = (op.code if op is not None else None, int(arity))
        label = target.model
    domains = OrderedDict((d.name, d.names()) for d in target.domains())
    layouts = [l.name for l in target.layouts()]
    return label, ops, domains, layouts


def _only(left, right):
    return [n for n in left if n not in right]


def diff(left, right):
    """
    Compare two tables
    left, right (Catalogue or ModelView)
    returns (OrderedDict): machine-readable differences, with the keys
      "left", "right", "operations", "domains" and "layouts". Empty lists
      and mappings mean no difference.
    """
    llabel, lops, ldoms, llay = _summary(left)
    rlabel, rops, rdoms, rlay = _summary(right)

    code_changes = OrderedDict()
    arity_changes = OrderedDict()
    for name in lops:
        if name not in rops:
            continue
        (lcode, larity), (rcode, rarity) = lops[name], rops[name]
        if lcode != rcode:
            code_changes[name] = OrderedDict((("left", lcode), ("right", rcode)))
        if larity is not None and rarity is not None and larity != rarity:
            arity_changes[name] = OrderedDict((("left", larity), ("right", rarity)))

    changed = OrderedDict()
    for name in ldoms:
        if name not in rdoms:
            continue
        added = _only(rdoms[name], ldoms[name])
        removed = _only(ldoms[name], rdoms[name])
        if added or removed:
            changed[name] = OrderedDict((("added", added), ("removed", removed)))

    return OrderedDict((
        ("left", llabel),
        ("right", rlabel),
        ("operations", OrderedDict((("only_left", _only(lops, rops)),
                                    ("only_right", _only(rops, lops)),
                                    ("code_changes", code_changes),
                                    ("arity_changes", arity_changes)))),
        ("domains", OrderedDict((("only_left", _only(ldoms, rdoms)),
                                 ("only_right", _only(rdoms, ldoms)),
                                 ("changed", changed)))),
        ("layouts", OrderedDict((("only_left", _only(llay, rlay)),
                                 ("only_right", _only(rlay, llay))))),
    ))

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
