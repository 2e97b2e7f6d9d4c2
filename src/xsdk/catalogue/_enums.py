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
# Value domains of the enumerated camera properties.
#
# Three shapes of domains exist:
#  * EnumDomain: a closed set of named values (tokens, signed shifts in tens,
#    or physical quantities).
#  * RangeDomain: every integer between a minimum and a maximum, by step.
#  * FlagCategory: single-bit flags of one 32-bit word. Several categories are
#    grouped in a BitsetDomain, whose values are Bitset (one word per category).

from collections import OrderedDict, namedtuple
import logging
import re

from ._core import UnknownEnumValue, SemanticError, normalize_name, normalize_domain

KIND_TOKEN = "token"
KIND_SIGNED = "signed"
KIND_PHYSICAL = "physical"
KIND_RANGE = "range"
KIND_FLAGS = "flags"

ENUM_KINDS = (KIND_TOKEN, KIND_SIGNED, KIND_PHYSICAL)

# Units of the physical domains
UNIT_KELVIN = "K"
UNIT_MS = "ms"
UNIT_DECISECOND = "ds"

EnumValue = namedtuple("EnumValue", ["domain", "name", "value", "alias_of", "reserved", "extension"])
# alias_of (str or None): canonical name, if this name is an alias
# reserved (bool): published, but not to be used
# extension (bool): only exists in a model view, not in the base catalogue
EnumValue.__new__.__defaults__ = (None, False, False)

VENDOR_PREFIX = "SDK_"


class Domain(object):
    """
    Common interface of all the value domains
    """
    kind = None

    def __init__(self, name, prefixes, aliases=(), unit=None, base=None):
        """
        name (str): identifier of the domain (eg, "FilmSimulation")
        prefixes (str or list of str): prefix of the public names (eg, "FILMSIMULATION").
          The first one is the main prefix, the others are legacy spellings.
        aliases (iterable of str): other identifiers of the domain
        unit (str or None): unit of the values, for physical domains
        base (Domain or None): the domain this one is restricted from
        """
        self.name = name
        if isinstance(prefixes, str):
            prefixes = [prefixes]
        self.prefixes = tuple(prefixes)
        self.aliases = tuple(aliases)
        self.unit = unit
        self.base = base
        self._name_prefixes = tuple(normalize_name(p) + "_" for p in self.prefixes if p)

    def __repr__(self):
        return "%s(%s)" % (self.__class__.__name__, self.name)

    @property
    def prefix(self):
        return self.prefixes[0]

    def keys(self):
        """
        returns (set of str): all the normalized identifiers of the domain
        """
        return {normalize_domain(n) for n in (self.name,) + self.aliases}

    def _short_key(self, name, known):
        """
        Normalizes a value name, and removes the vendor or domain prefix if
        the name is passed as the public constant name.
        known (container of str): normalized names accepted
        """
        key = normalize_name(name)
        if key in known:
            return key
        if key.startswith(VENDOR_PREFIX):
            key = key[len(VENDOR_PREFIX):]
        for p in self._name_prefixes:
            if key.startswith(p) and key[len(p):] in known:
                return key[len(p):]
        return key

    def value(self, name):
        raise NotImplementedError()

    def entry(self, name):
        raise NotImplementedError()

    def values(self):
        raise NotImplementedError()

    def names(self):
        """
        returns (tuple of str): all the published names (including aliases)
        """
        return tuple(e.name for e in self.values())

    def __contains__(self, name):
        try:
            self.entry(name)
        except UnknownEnumValue:
            return False
        return True


class EnumDomain(Domain):
    """
    Closed set of named values. Several names may have the same value, but then
    all but one must be explicitly tagged as aliases.
    """

    def __init__(self, name, prefixes, kind, entries, aliases=(), unit=None, base=None):
        """
        kind (KIND_TOKEN, KIND_SIGNED, KIND_PHYSICAL)
        entries (iterable of EnumValue or tuple): name, value, alias_of,
          reserved, extension. For aliases, the value is taken from the
          canonical entry and can be None.
        raises SemanticError: if the entries are not consistent
        """
        Domain.__init__(self, name, prefixes, aliases, unit, base)
        if kind not in ENUM_KINDS:
            raise SemanticError("Domain %s has unknown kind %r" % (name, kind))
        self.kind = kind

        self._entries = OrderedDict()  # normalized name -> EnumValue
        pending = []
        for e in entries:
            e = self._as_entry(e)
            key = normalize_name(e.name)
            if key in self._entries or any(normalize_name(p.name) == key for p in pending):
                raise SemanticError("Value %s defined twice in domain %s" % (e.name, name))
            if e.alias_of is None:
                self._entries[key] = e
            else:
                pending.append(e)

        # Aliases can refer to other aliases, as long as it ends on a canonical name
        while pending:
            left = []
            for e in pending:
                tkey = normalize_name(e.alias_of)
                if tkey in self._entries:
                    target = self._entries[tkey]
                    canonical = target.alias_of or target.name
                    if e.value is not None and e.value != target.value:
                        raise SemanticError("Alias %s of domain %s has value %s, but %s has %s" %
                                            (e.name, name, e.value, target.name, target.value))
                    self._entries[normalize_name(e.name)] = e._replace(value=target.value,
                                                                       alias_of=canonical)
                elif any(normalize_name(p.name) == tkey for p in pending):
                    left.append(e)
                else:
                    raise SemanticError("Alias %s of domain %s refers to unknown value %s" %
                                        (e.name, name, e.alias_of))
            if len(left) == len(pending):
                raise SemanticError("Aliases %s of domain %s form a loop" %
                                    (", ".join(e.name for e in left), name))
            pending = left

        self._by_value = {}  # value -> canonical EnumValue
        for e in self._entries.values():
            if e.alias_of is not None:
                continue
            if not isinstance(e.value, int):
                raise SemanticError("Value %s of domain %s is not an integer: %r" %
                                    (e.name, name, e.value))
            if e.value in self._by_value:
                other = self._by_value[e.value]
                if base is not None:
                    # A view may publish a wrong encoding: leave it to the checker
                    logging.debug("Values %s and %s of view domain %s share encoding %d",
                                  other.name, e.name, name, e.value)
                    continue
                raise SemanticError("Values %s and %s of domain %s have both encoding %d, "
                                    "but neither is an alias" % (other.name, e.name, name, e.value))
            self._by_value[e.value] = e

        # In a restricted domain, an alias may be published without its target
        for e in self._entries.values():
            if e.alias_of is not None and e.value not in self._by_value:
                self._by_value[e.value] = e

    def _as_entry(self, e):
        if isinstance(e, EnumValue):
            return e._replace(domain=self.name)
        return EnumValue(self.name, *e)

    def entry(self, name):
        """
        name (str or int): name of the value, with or without the public prefix
        returns (EnumValue)
        raises UnknownEnumValue: if the name is not published in the domain
        """
        key = self._short_key(name, self._entries)
        try:
            return self._entries[key]
        except KeyError:
            raise UnknownEnumValue("Domain %s has no value %s" % (self.name, name))

    def value(self, name):
        return self.entry(name).value

    def values(self):
        return tuple(self._entries.values())

    def canonical(self):
        """
        returns (tuple of EnumValue): the entries which are not aliases
        """
        return tuple(e for e in self._entries.values() if e.alias_of is None)

    def name_of(self, value):
        """
        returns (str): the canonical name of the given encoding
        raises UnknownEnumValue: if no name has this encoding
        """
        try:
            return self._by_value[value].name
        except KeyError:
            raise UnknownEnumValue("Domain %s has no value encoded %r" % (self.name, value))

    def validate(self, value):
        """
        Check the value is one of the published encodings
        returns (int): the value
        raises UnknownEnumValue: if no published name encodes it
        """
        if isinstance(value, bool) or value not in self._by_value:
            raise UnknownEnumValue("Value %r is not part of domain %s" % (value, self.name))
        return value

    def restrict(self, names=None, aliases=None, extensions=None):
        """
        Create the subset of the domain which a model view publishes
        names (None, list of str, or dict str -> int): names of the base domain to keep.
          None means all of them. If it's a dict, the value is the encoding declared
          by the view, which is kept as-is, so that a checker can compare it.
        aliases (dict str -> str): extra names of the view -> name they refer to
        extensions (dict str -> int): names only existing in the view
        returns (EnumDomain)
        raises UnknownEnumValue: if a name (not declared with a value) is unknown
        """
        entries = []
        if names is None:
            entries.extend(self.values())
        else:
            declared = names if isinstance(names, dict) else dict.fromkeys(names)
            for n, v in declared.items():
                try:
                    e = self.entry(n)
                except UnknownEnumValue:
                    if v is None:
                        raise
                    logging.debug("View value %s not in base domain %s", n, self.name)
                    entries.append(EnumValue(self.name, n, v))
                    continue
                if v is not None and v != e.value:
                    # Declared encoding differs from base: keep the view one
                    e = e._replace(value=v, alias_of=None)
                entries.append(e)

            # An alias whose target isn't published becomes the canonical name
            present = {normalize_name(e.name) for e in entries}
            for i, e in enumerate(entries):
                if e.alias_of is not None and normalize_name(e.alias_of) not in present:
                    if not any(o.value == e.value and o.alias_of is None for o in entries):
                        entries[i] = e._replace(alias_of=None)
                        present.add(normalize_name(e.name))
                    else:
                        target = next(o for o in entries if o.value == e.value and o.alias_of is None)
                        entries[i] = e._replace(alias_of=target.name)

        for n, target in (aliases or {}).items():
            entries.append(EnumValue(self.name, n, None, target))
        for n, v in (extensions or {}).items():
            entries.append(EnumValue(self.name, n, v, None, False, True))

        return EnumDomain(self.name, self.prefixes, self.kind, entries,
                          self.aliases, self.unit, base=self)


def parse_number(name):
    """
    Converts a name such as "-9", "+9" or "0" to an int
    returns (int or None): None if the name is not a number
    """
    if isinstance(name, bool):
        return None
    if isinstance(name, int):
        return name
    m = re.match(r"^\s*([+-]?\d+)\s*$", str(name))
    if m:
        return int(m.group(1))
    return None


class RangeDomain(Domain):
    """
    All the integers from minimum to maximum (included), by step.
    The names are the numbers written in decimal ("-9", "+9", "0") and the
    named points "MIN" and "MAX".
    """
    kind = KIND_RANGE

    def __init__(self, name, prefixes, minimum, maximum, step=1, aliases=(), unit=None,
                 base=None, step_declared=False):
        Domain.__init__(self, name, prefixes, aliases, unit, base)
        if minimum > maximum:
            raise SemanticError("Domain %s has minimum %d > maximum %d" % (name, minimum, maximum))
        if step <= 0 or (maximum - minimum) % step:
            raise SemanticError("Domain %s has step %s not fitting [%d, %d]" %
                                (name, step, minimum, maximum))
        self.minimum = minimum
        self.maximum = maximum
        self.step = step
        # If the step is published as a constant (eg, WB_R_SHIFT_STEP)
        self.step_declared = step_declared
        self.points = OrderedDict((("MIN", minimum), ("MAX", maximum)))

    def entry(self, name):
        key = self._short_key(name, self.points)
        if key in self.points:
            return EnumValue(self.name, key, self.points[key], str(self.points[key]))
        v = parse_number(name)
        if v is None:
            raise UnknownEnumValue("Domain %s has no value %s" % (self.name, name))
        return EnumValue(self.name, str(v), self.validate(v))

    def value(self, name):
        return self.entry(name).value

    def validate(self, value):
        """
        raises UnknownEnumValue: if the value is out of range or not on a step
        """
        if (isinstance(value, bool) or not isinstance(value, int)
            or not self.minimum <= value <= self.maximum
            or (value - self.minimum) % self.step):
            raise UnknownEnumValue("Value %r is outside of domain %s [%d, %d] (step %d)" %
                                   (value, self.name, self.minimum, self.maximum, self.step))
        return value

    def name_of(self, value):
        return str(self.validate(value))

    def values(self):
        vals = [EnumValue(self.name, str(v), v)
                for v in range(self.minimum, self.maximum + 1, self.step)]
        vals.extend(EnumValue(self.name, n, v, str(v)) for n, v in self.points.items())
        return tuple(vals)

    def restrict(self, names=None, range=None, step=None):
        """
        names: only "all" or None are accepted, a range is restricted by its bounds
        range (None or (int, int)): new bounds, within the current ones
        step (None or int): new step
        """
        if names not in (None, "all"):
            raise SemanticError("Range domain %s can only be restricted by bounds" % (self.name,))
        minimum, maximum = range or (self.minimum, self.maximum)
        return RangeDomain(self.name, self.prefixes, minimum, maximum,
                           step or self.step, self.aliases, self.unit, base=self,
                           step_declared=step is not None)


class FlagCategory(Domain):
    """
    Single-bit flags of one 32-bit word. The name of each flag gives the
    position of its bit, and its value is the mask with only this bit set.
    """
    kind = KIND_FLAGS
    WORD_BITS = 32

    def __init__(self, name, prefixes, bits, number=1, flag_aliases=None, reserved=(),
                 aliases=(), base=None):
        """
        bits (list of str or None): name of each bit, from bit 0. None for unused bits.
        number (int): position of this category in its bitset (starting at 1)
        flag_aliases (dict str -> str): alias name -> flag name
        reserved (iterable of str): flags which are published but reserved
        """
        Domain.__init__(self, name, prefixes, aliases, None, base)
        if len(bits) > self.WORD_BITS:
            raise SemanticError("Category %s has %d bits, more than a word" % (name, len(bits)))
        self.number = number
        self.bits = tuple(bits)
        self.reserved = frozenset(normalize_name(r) for r in reserved)

        self._entries = OrderedDict()
        for i, b in enumerate(self.bits):
            if b is None:
                continue
            key = normalize_name(b)
            if key in self._entries:
                raise SemanticError("Flag %s defined twice in %s" % (b, name))
            self._entries[key] = EnumValue(name, b, 1 << i, None, key in self.reserved)
        for a, target in (flag_aliases or {}).items():
            tkey = normalize_name(target)
            if tkey not in self._entries:
                raise SemanticError("Flag alias %s of %s refers to unknown flag %s" %
                                    (a, name, target))
            t = self._entries[tkey]
            self._entries[normalize_name(a)] = EnumValue(name, a, t.value, t.name, t.reserved)
        for r in self.reserved:
            if r not in self._entries:
                raise SemanticError("Reserved flag %s is not a flag of %s" % (r, name))
        self.valid_mask = 0
        for e in self._entries.values():
            self.valid_mask |= e.value

    def entry(self, name):
        key = self._short_key(name, self._entries)
        try:
            return self._entries[key]
        except KeyError:
            raise UnknownEnumValue("Category %s has no flag %s" % (self.name, name))

    def value(self, name):
        return self.entry(name).value

    def values(self):
        return tuple(self._entries.values())

    def mask(self, names):
        """
        names (iterable of str): flags to set
        returns (int): the word with all these flags set
        """
        m = 0
        for n in names:
            m |= self.value(n)
        return m

    def flags_of(self, mask):
        """
        returns (tuple of str): canonical names of the flags set, from low to high bit
        raises UnknownEnumValue: if a bit set is not a published flag
        """
        self.validate(mask)
        return tuple(self.bits[i] for i in range(len(self.bits))
                     if self.bits[i] is not None and mask & (1 << i)
                     and normalize_name(self.bits[i]) in self._entries)

    def name_of(self, value):
        for e in self._entries.values():
            if e.value == value and e.alias_of is None:
                return e.name
        raise UnknownEnumValue("Category %s has no flag encoded 0x%X" % (self.name, value))

    def validate(self, mask):
        if isinstance(mask, bool) or not isinstance(mask, int) or mask < 0:
            raise UnknownEnumValue("Mask %r is not valid for %s" % (mask, self.name))
        extra = mask & ~self.valid_mask
        if extra:
            raise UnknownEnumValue("Mask 0x%08X has bits 0x%08X not part of %s" %
                                   (mask, extra, self.name))
        return mask

    def restrict(self, names=None, aliases=None, extensions=None):
        if extensions:
            raise SemanticError("Category %s cannot be extended by a view" % (self.name,))
        if names is None:
            bits = self.bits
            flag_aliases = {e.name: e.alias_of for e in self._entries.values() if e.alias_of}
        else:
            keep = set()
            flag_aliases = {}
            for n in names:
                e = self.entry(n)
                if e.alias_of is None:
                    keep.add(normalize_name(e.name))
                else:
                    flag_aliases[n] = e.alias_of
            # an alias published without its flag still needs the bit
            for n, target in list(flag_aliases.items()):
                tkey = normalize_name(target)
                if tkey not in keep:
                    keep.add(tkey)
                    logging.debug("Keeping flag %s of %s for alias %s", target, self.name, n)
            bits = [b if b is not None and normalize_name(b) in keep else None for b in self.bits]
        flag_aliases.update(aliases or {})
        reserved = [r for r in self.reserved if any(b and normalize_name(b) == r for b in bits)]
        return FlagCategory(self.name, self.prefixes, bits, self.number, flag_aliases,
                            reserved, self.aliases, base=self)


class Bitset(object):
    """
    Immutable value of a BitsetDomain: one word per category
    """

    def __init__(self, domain, words=None):
        self.domain = domain
        if words is None:
            words = (0,) * len(domain.categories)
        words = tuple(words)
        if len(words) != len(domain.categories):
            raise ValueError("%s needs %d words, got %d" %
                             (domain.name, len(domain.categories), len(words)))
        for c, w in zip(domain.categories, words):
            c.validate(w)
        self.words = words

    def __iter__(self):
        return iter(self.words)

    def __len__(self):
        return len(self.words)

    def __eq__(self, other):
        if not isinstance(other, Bitset):
            return NotImplemented
        return self.domain is other.domain and self.words == other.words

    def __ne__(self, other):
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self):
        return hash((self.domain.name, self.words))

    def __repr__(self):
        return "Bitset(%s, (%s))" % (self.domain.name, ", ".join("0x%08X" % w for w in self.words))

    def word(self, category):
        return self.words[self.domain.index(category)]

    def with_flags(self, category, *names):
        """
        returns (Bitset): a copy with the given flags of the category set
        """
        i = self.domain.index(category)
        words = list(self.words)
        words[i] |= self.domain.categories[i].mask(names)
        return Bitset(self.domain, words)

    def without_flags(self, category, *names):
        i = self.domain.index(category)
        words = list(self.words)
        words[i] &= ~self.domain.categories[i].mask(names)
        return Bitset(self.domain, words)

    def flags(self):
        """
        returns (OrderedDict int -> tuple of str): category number -> flags set
        """
        return OrderedDict((c.number, c.flags_of(w))
                           for c, w in zip(self.domain.categories, self.words))


class BitsetDomain(object):
    """
    Group of FlagCategory which together form one value. The categories are
    never merged into a single integer.
    """

    def __init__(self, name, categories, aliases=()):
        self.name = name
        self.aliases = tuple(aliases)
        self.categories = tuple(categories)
        for i, c in enumerate(self.categories, 1):
            if c.number != i:
                raise SemanticError("Bitset %s has category %s at position %d, but numbered %d" %
                                    (name, c.name, i, c.number))

    def __repr__(self):
        return "BitsetDomain(%s, %d words)" % (self.name, len(self.categories))

    def keys(self):
        return {normalize_domain(n) for n in (self.name,) + self.aliases}

    def index(self, category):
        """
        category (int or str): number (starting at 1), or name of the category
        returns (int): index of the category in the words
        """
        if isinstance(category, int):
            if not 1 <= category <= len(self.categories):
                raise UnknownEnumValue("Bitset %s has no category %d" % (self.name, category))
            return category - 1
        key = normalize_domain(category)
        for i, c in enumerate(self.categories):
            if key in c.keys():
                return i
        raise UnknownEnumValue("Bitset %s has no category %s" % (self.name, category))

    def make(self, flags=None):
        """
        flags (dict int or str -> iterable of str): category -> flags to set
        returns (Bitset)
        """
        b = Bitset(self)
        for cat, names in (flags or {}).items():
            b = b.with_flags(cat, *names)
        return b

    def from_words(self, words):
        """
        returns (Bitset)
        raises ValueError: if the number of words is wrong
        raises UnknownEnumValue: if a word has unpublished bits
        """
        return Bitset(self, words)

    def restrict(self, categories):
        """
        categories (list of FlagCategory): the restricted categories, in order
        """
        return BitsetDomain(self.name, categories, self.aliases)

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
