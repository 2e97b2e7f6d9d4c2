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
import logging
import unittest

from xsdk import catalogue
from xsdk.catalogue import EnumDomain, RangeDomain, FlagCategory, BitsetDomain, Bitset, \
    SemanticError, UnknownEnumValue, ERR_PARAM

logging.basicConfig(format="%(asctime)s  %(levelname)-7s %(module)-15s: %(message)s")
logging.getLogger().setLevel(logging.DEBUG)


class TestShippedDomains(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.cat = catalogue.get_catalogue()

    def test_color_temperature(self):
        self.assertEqual(catalogue.enum_value("ColorTemp", "5600"), 5600)
        self.assertEqual(catalogue.enum_value("ColorTemp", "Current"), 0)
        d = self.cat.domain("WB_COLORTEMP")
        self.assertEqual(d.name, "WBColorTemp")
        self.assertEqual(d.kind, "physical")
        self.assertEqual(d.unit, "K")

    def test_film_simulation_alias(self):
        provia = self.cat.enum_value("FilmSim", "ProVia")
        std = self.cat.enum_value("FilmSim", "Std")
        self.assertEqual(provia, 1)
        self.assertEqual(std, 1)
        d = self.cat.domain("FilmSimulation")
        self.assertEqual(d.entry("STD").alias_of, "PROVIA")
        self.assertIsNone(d.entry("PROVIA").alias_of)
        # The encoding gives back the canonical name
        self.assertEqual(d.name_of(1), "PROVIA")
        # Public constant names are also accepted
        self.assertEqual(d.value("SDK_FILMSIMULATION_STD"), 1)

    def test_unknown(self):
        with self.assertRaises(UnknownEnumValue) as cm:
            self.cat.enum_value("FilmSimulation", "KODACHROME")
        self.assertEqual(cm.exception.errno, ERR_PARAM)
        with self.assertRaises(UnknownEnumValue):
            self.cat.enum_value("NoSuchDomain", "PROVIA")

    def test_signed(self):
        d = self.cat.domain("ColorMode")
        self.assertEqual(d.kind, "signed")
        self.assertEqual(d.value("MEDIUM_LOW"), -10)
        self.assertEqual(d.value("M1"), -10)
        self.assertEqual(d.value("P2"), d.value("HIGH"))
        self.assertEqual(d.value("P3"), 30)

    def test_physical(self):
        self.assertEqual(self.cat.enum_value("SelfTimer", "10"), 10000)
        self.assertEqual(self.cat.domain("CaptureDelay").unit, "ms")
        self.assertEqual(self.cat.enum_value("PreviewTime", "1P5SEC"), 15)
        self.assertEqual(self.cat.enum_value("DRange", "400"), 400)
        # legacy prefix
        self.assertEqual(self.cat.enum_value("CaptureDelay", "SDK_SELFTIMER_2"), 2000)

    def test_closed(self):
        """
        A domain rejects any number that no published name encodes
        """
        for d in self.cat.domains():
            if not isinstance(d, EnumDomain):
                continue
            for e in d.values():
                self.assertEqual(d.validate(e.value), e.value)
                self.assertEqual(d.value(e.name), e.value)
                self.assertEqual(d.value(d.name_of(e.value)), e.value)
        d = self.cat.domain("LiveViewSize")
        self.assertRaises(UnknownEnumValue, d.validate, 1024)
        self.assertRaises(UnknownEnumValue, d.validate, 0)
        self.assertEqual(d.value("1024"), d.value("L"))
        self.assertRaises(UnknownEnumValue, d.validate, True)

    def test_wb_shift(self):
        for n, v in (("-9", -9), ("+9", 9), ("0", 0), ("MIN", -9), ("MAX", 9)):
            self.assertEqual(self.cat.enum_value("WBRShift", n), v)
        for n in ("-10", "+10", "nine", "9.5"):
            with self.assertRaises(UnknownEnumValue):
                self.cat.enum_value("WBRShift", n)
        d = self.cat.domain("WBShiftB")
        self.assertEqual(d.validate(-3), -3)
        self.assertRaises(UnknownEnumValue, d.validate, 10)

    def test_focus_area_ranges(self):
        self.assertEqual(self.cat.domain("FocusAreaSize").minimum, 1)
        self.assertEqual(self.cat.domain("FocusAreaSize").maximum, 5)
        self.assertRaises(UnknownEnumValue, self.cat.enum_value, "FocusAreaH", "4")
        self.assertEqual(self.cat.enum_value("LCDBrightness", "-5"), -5)

    def test_function_lock(self):
        b = self.cat.bitset("FunctionLockCategory")
        self.assertEqual(len(b.categories), 3)
        cat2 = b.categories[1]
        self.assertEqual(cat2.number, 2)
        self.assertEqual(cat2.value("SETUP"), 0x8)
        self.assertEqual(cat2.value("OTHERSETUP"), 0x8)
        self.assertEqual(cat2.value("RDIAL"), 0x800)
        self.assertTrue(cat2.entry("MOVIEREC").reserved)

        val = b.make({1: ["FOCUSMODE", "ISO"], "FunctionLockCategory3": ["EXPOSUREMODE"]})
        self.assertEqual(val.words, (0x9, 0, 0x10))
        self.assertEqual(len(val), 3)
        self.assertEqual(val.flags()[1], ("FOCUSMODE", "ISO"))
        val = val.with_flags(2, "OTHERSETUP").without_flags(1, "ISO")
        self.assertEqual(tuple(val), (0x1, 0x8, 0x10))
        self.assertEqual(val, b.from_words([1, 8, 0x10]))

    def test_custom_disp_info(self):
        b = self.cat.bitset("CustomDispInfo")
        self.assertEqual(len(b.categories), 2)
        val = b.make({2: ["35MMFORMAT"]})
        self.assertEqual(val.words, (0, 1))
        # The second word only has 12 flags
        self.assertRaises(UnknownEnumValue, b.from_words, [0, 0x1000])
        self.assertRaises(ValueError, b.from_words, [0])


class TestDomains(unittest.TestCase):

    def test_alias_needed(self):
        """
        Two names with the same encoding must be tagged as alias
        """
        with self.assertRaises(SemanticError):
            EnumDomain("Test", "TEST", "token", [("A", 1), ("B", 1)])
        d = EnumDomain("Test", "TEST", "token", [("A", 1), ("B", None, "A")])
        self.assertEqual(d.value("b"), 1)

    def test_alias_chain(self):
        d = EnumDomain("Test", "TEST", "token", [("C", None, "B"), ("B", None, "A"), ("A", 3)])
        self.assertEqual(d.value("C"), 3)
        self.assertEqual(d.entry("C").alias_of, "A")
        with self.assertRaises(SemanticError):
            EnumDomain("Test", "TEST", "token", [("A", None, "B"), ("B", None, "A")])
        with self.assertRaises(SemanticError):
            EnumDomain("Test", "TEST", "token", [("A", None, "Z")])

    def test_bad_kind(self):
        with self.assertRaises(SemanticError):
            EnumDomain("Test", "TEST", "colour", [("A", 1)])

    def test_restrict(self):
        base = EnumDomain("Test", "TEST", "token", [("A", 1), ("B", 2), ("C", 3),
                                                    ("AA", None, "A")])
        d = base.restrict(["A", "AA", "C"], aliases={"SEE": "C"}, extensions={"X": 0x1000})
        self.assertIs(d.base, base)
        self.assertEqual(d.value("SEE"), 3)
        self.assertEqual(d.value("X"), 0x1000)
        self.assertTrue(d.entry("X").extension)
        self.assertRaises(UnknownEnumValue, d.value, "B")
        self.assertRaises(UnknownEnumValue, d.validate, 2)
        self.assertRaises(UnknownEnumValue, base.restrict, ["Z"])

        # The alias becomes canonical if its target is not kept
        d = base.restrict(["AA"])
        self.assertIsNone(d.entry("AA").alias_of)
        self.assertEqual(d.value("AA"), 1)

    def test_range(self):
        d = RangeDomain("Shift", "SHIFT", -4, 4, step=2)
        self.assertEqual(d.value("+2"), 2)
        self.assertRaises(UnknownEnumValue, d.value, "1")
        self.assertEqual([e.value for e in d.values() if e.alias_of is None], [-4, -2, 0, 2, 4])
        with self.assertRaises(SemanticError):
            RangeDomain("Shift", "SHIFT", 4, -4)
        with self.assertRaises(SemanticError):
            RangeDomain("Shift", "SHIFT", 0, 5, step=2)
        r = d.restrict(range=(-2, 2))
        self.assertRaises(UnknownEnumValue, r.value, "-4")
        self.assertFalse(r.step_declared)
        self.assertTrue(d.restrict(step=2).step_declared)

    def test_flags(self):
        c = FlagCategory("Lock", "LOCK", ["A", None, "C"], flag_aliases={"SEA": "C"})
        self.assertEqual(c.value("C"), 0x4)
        self.assertEqual(c.mask(["A", "SEA"]), 0x5)
        self.assertEqual(c.flags_of(0x5), ("A", "C"))
        self.assertRaises(UnknownEnumValue, c.validate, 0x2)
        with self.assertRaises(SemanticError):
            FlagCategory("Lock", "LOCK", ["F%d" % i for i in range(33)])
        with self.assertRaises(SemanticError):
            c.restrict(extensions={"D": 0x8})

        r = c.restrict(["SEA"])
        # the flag of the alias is kept
        self.assertEqual(r.value("SEA"), 0x4)
        self.assertRaises(UnknownEnumValue, r.value, "A")

    def test_bitset_numbering(self):
        c1 = FlagCategory("Lock1", "LOCK1", ["A"], number=1)
        c2 = FlagCategory("Lock2", "LOCK2", ["B"], number=1)
        with self.assertRaises(SemanticError):
            BitsetDomain("Lock", [c1, c2])
        c2 = FlagCategory("Lock2", "LOCK2", ["B"], number=2)
        b = BitsetDomain("Lock", [c1, c2])
        v = Bitset(b)
        self.assertEqual(v.words, (0, 0))
        self.assertNotEqual(v, v.with_flags("Lock2", "B"))
        self.assertRaises(UnknownEnumValue, b.index, 3)


if __name__ == "__main__":
    unittest.main()
