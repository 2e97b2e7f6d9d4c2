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
import os
import shutil
import tempfile
import unittest

from xsdk import catalogue
from xsdk.catalogue import ParseError, SemanticError, build_catalogue, build_view

logging.basicConfig(format="%(asctime)s  %(levelname)-7s %(module)-15s: %(message)s")
logging.getLogger().setLevel(logging.DEBUG)

BASE_YAML = """
families:
  0x21: {name: shooting, label: Shooting condition}
  0x33: {name: liveview, label: Live view}
operations:
  SetImageSize: 0x2101
  StartLiveView: 0x3301
parts:
  - !include part.yaml
"""

PART_YAML = """
operations:
  GetImageSize: 0x2102
  CapImageSize: 0x2131
domains:
  ImageSize:
    values:
      L_3_2: 0x0001
      L: {alias: L_3_2}
      M_3_2: 0x0002
layouts:
  Point:
    size: 8
    fields:
      - {name: h, type: i4, offset: 0}
      - {name: v, type: i4, offset: 4}
"""

VIEW_YAML = """
model: TEST1
operations:
  CapImageSize: 2
  SetImageSize: 1
  GetImageSize: 1
  StartLiveView: -1
domains:
  ImageSize: [L_3_2]
layouts:
  - Point
"""


class TestReadYaml(unittest.TestCase):

    def setUp(self):
        self.dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.dir)

    def _write(self, name, content):
        fn = os.path.join(self.dir, name)
        with open(fn, "w") as f:
            f.write(content)
        return fn

    def test_include(self):
        self._write("part.yaml", PART_YAML)
        fn = self._write("base.yaml", BASE_YAML)
        data = catalogue.read_yaml(fn)
        self.assertEqual(data["parts"][0]["operations"]["GetImageSize"], 0x2102)
        # The order of the file is kept
        self.assertEqual(list(data["operations"].keys()), ["SetImageSize", "StartLiveView"])

        cat = catalogue.load_catalogue(fn)
        self.assertEqual([op.name for op in cat.operations()],
                         ["SetImageSize", "GetImageSize", "CapImageSize", "StartLiveView"])
        self.assertEqual(cat.enum_value("ImageSize", "L"), 1)
        self.assertEqual(cat.layout("Point").size, 8)

    def test_missing_include(self):
        fn = self._write("base.yaml", BASE_YAML)
        self.assertRaises(IOError, catalogue.read_yaml, fn)

    def test_duplicate_key(self):
        fn = self._write("dup.yaml", "operations:\n  SetImageSize: 0x2101\n"
                                     "  SetImageSize: 0x2102\n")
        self.assertRaises(ParseError, catalogue.read_yaml, fn)

    def test_syntax_error(self):
        fn = self._write("bad.yaml", "operations:\n  SetImageSize: [0x2101\n")
        self.assertRaises(ParseError, catalogue.read_yaml, fn)

    def test_not_mapping(self):
        fn = self._write("list.yaml", "- SetImageSize\n")
        self.assertRaises(ParseError, catalogue.read_yaml, fn)

    def test_view_files(self):
        self._write("test1.yaml", VIEW_YAML)
        config = {"VIEW_PATH": self.dir}
        self.assertEqual(catalogue.view_path(config)[0], self.dir)
        views = catalogue.list_views(config)
        self.assertIn("TEST1", views)
        self.assertIn("GFX50SII", views)

    def test_view_per_config(self):
        """
        Two configurations with different files for the same model get
        different views
        """
        dir2 = tempfile.mkdtemp()
        try:
            self._write("extra.yaml", "model: EXTRA\noperations:\n  SetImageSize: 1\n")
            with open(os.path.join(dir2, "extra.yaml"), "w") as f:
                f.write("model: EXTRA\noperations:\n  SetImageSize: -1\n")
            view1 = catalogue.get_view("EXTRA", {"VIEW_PATH": self.dir})
            view2 = catalogue.get_view("extra", {"VIEW_PATH": dir2})
        finally:
            shutil.rmtree(dir2)
        self.assertTrue(view1.supports("SetImageSize"))
        self.assertFalse(view2.supports("SetImageSize"))
        # Still cached per file
        self.assertIs(catalogue.get_view("Extra", {"VIEW_PATH": self.dir}), view1)
        self.assertRaises(LookupError, catalogue.get_view, "EXTRA", {"VIEW_PATH": ""})

    def test_load_view(self):
        self._write("part.yaml", PART_YAML)
        cat = catalogue.load_catalogue(self._write("base.yaml", BASE_YAML))
        view = catalogue.load_view(self._write("test1.yaml", VIEW_YAML), cat)
        self.assertEqual(view.model, "TEST1")
        self.assertEqual(view.label, "TEST1")
        self.assertEqual(view.code("SetImageSize"), 0x2101)
        self.assertFalse(view.supports("StartLiveView"))
        self.assertEqual(view.enum_value("ImageSize", "L_3_2"), 1)
        self.assertRaises(catalogue.UnknownEnumValue, view.enum_value, "ImageSize", "M_3_2")


class TestBuild(unittest.TestCase):
    """
    Inconsistent content of the data files
    """

    def _base(self, **kwargs):
        data = {"families": {0x21: {"name": "shooting"}},
                "operations": {"SetImageSize": 0x2101, "GetImageSize": 0x2102},
                "domains": {"ImageSize": {"values": {"L_3_2": 1, "M_3_2": 2}}}}
        data.update(kwargs)
        return data

    def test_valid(self):
        cat = build_catalogue(self._base())
        self.assertEqual(cat.operation_code("GetImageSize"), 0x2102)

    def test_operations(self):
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(operations={"StartLiveView": 0x3301}))
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(operations={"SetImageSize": 0x2101, "GetImageSize": 0x2101}))
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(operations={"SetImageSize": "0x2101"}))
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(operations={"SetImageSize": {"aliases": ["Foo"]}}))

    def test_defined_twice(self):
        part = {"operations": {"SetImageSize": 0x2103}}
        self.assertRaises(SemanticError, build_catalogue, self._base(parts=[part]))

    def test_domains(self):
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(domains={"ImageSize": {"values": {"L": 1, "M": 1}}}))
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(domains={"ImageSize": {"prefix": "IMAGESIZE"}}))
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(domains={"Shift": {"range": [9, -9]}}))
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(domains={"Shift": {"range": 9}}))
        # Two domains with the same identifier
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(domains={"Image_Size": {"values": {"L": 1}},
                                              "ImageSize": {"values": {"L": 1}}}))

    def test_bitsets(self):
        domains = {"Lock1": {"bits": ["A", "B"]}, "Mode": {"values": {"A": 1}}}
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(domains=domains, bitsets={"Lock": {"categories": ["Lock9"]}}))
        self.assertRaises(SemanticError, build_catalogue,
                          self._base(domains=domains,
                                     bitsets={"Lock": {"categories": ["Lock1", "Mode"]}}))
        cat = build_catalogue(self._base(domains=domains,
                                         bitsets={"Lock": {"categories": ["Lock1"]}}))
        self.assertEqual(cat.bitset("Lock").make({1: ["B"]}).words, (2,))

    def test_layouts(self):
        layouts = {"Outer": {"fields": [{"name": "p", "type": "record", "layout": "Inner",
                                         "offset": 0}]}}
        self.assertRaises(SemanticError, build_catalogue, self._base(layouts=layouts))
        layouts = {"Rec": {"size": 4, "fields": [{"name": "a", "type": "i4"}]}}
        self.assertRaises(SemanticError, build_catalogue, self._base(layouts=layouts))
        layouts = {"Rec": {"size": 4, "fields": [{"name": "a", "type": "i4", "offset": 0,
                                                  "colour": "red"}]}}
        self.assertRaises(SemanticError, build_catalogue, self._base(layouts=layouts))
        layouts = {"Rec": {"size": 6, "fields": [{"name": "a", "type": "i4", "offset": 0}]}}
        self.assertRaises(SemanticError, build_catalogue, self._base(layouts=layouts))

    def test_views(self):
        cat = build_catalogue(self._base())
        ops = {"SetImageSize": 1}
        self.assertRaises(SemanticError, build_view, {"operations": ops}, cat)
        self.assertRaises(SemanticError, build_view,
                          {"model": "T", "operations": ops, "aliases": {"SetSize": "SetFoo"}}, cat)
        self.assertRaises(SemanticError, build_view,
                          {"model": "T", "operations": ops, "domains": {"Colour": "all"}}, cat)
        self.assertRaises(SemanticError, build_view,
                          {"model": "T", "operations": ops, "domains": {"ImageSize": ["XL"]}}, cat)
        self.assertRaises(SemanticError, build_view,
                          {"model": "T", "operations": ops,
                           "domains": {"ImageSize": {"colour": "red"}}}, cat)
        self.assertRaises(SemanticError, build_view,
                          {"model": "T", "operations": ops, "layouts": ["Nothing"]}, cat)
        self.assertRaises(SemanticError, build_view,
                          {"model": "T", "operations": {"SetImageSize": -3}}, cat)

        view = build_view({"model": "T", "operations": ops, "aliases": {"SetSize": "SetImageSize"},
                           "domains": {"ImageSize": {"names": "all", "aliases": {"BIG": "L_3_2"}}}},
                          cat)
        self.assertEqual(view.enum_value("ImageSize", "BIG"), 1)


if __name__ == "__main__":
    unittest.main()
