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
import ctypes
import logging
import numpy
import random
import struct
import unittest

from xsdk import catalogue
from xsdk.catalogue import Field, RecordLayout, SemanticError, UnknownLayout, ERR_PARAM, \
    FORMAT_STRING

logging.basicConfig(format="%(asctime)s  %(levelname)-7s %(module)-15s: %(message)s")
logging.getLogger().setLevel(logging.DEBUG)


class TestShippedLayouts(unittest.TestCase):

    def test_focus_area(self):
        fa = catalogue.layout("FocusArea")
        self.assertEqual(fa.size, 12)
        self.assertEqual(fa.field_names, ("h", "v", "size"))
        data = fa.encode({"h": 1, "v": -2, "size": 3})
        self.assertEqual(len(data), 12)
        self.assertEqual(data, struct.pack("=iii", 1, -2, 3))
        self.assertEqual(dict(fa.decode(data)), {"h": 1, "v": -2, "size": 3})

    def test_focus_area_range(self):
        fa = catalogue.layout("FocusArea")
        self.assertRaises(ValueError, fa.encode, {"h": 4, "v": 0, "size": 3})
        self.assertRaises(ValueError, fa.encode, {"h": 0, "v": 0, "size": 0})
        self.assertRaises(ValueError, fa.encode, {"h": 0, "v": 0, "size": 3, "depth": 1})
        self.assertRaises(ValueError, fa.encode, {"h": 1.5, "v": 0, "size": 3})
        self.assertRaises(ValueError, fa.decode, b"\0" * 11)

    def test_focus_area_missing(self):
        fa = catalogue.layout("FocusArea")
        # size is in [1, 5], so it cannot be left to 0
        self.assertRaises(ValueError, fa.encode, {"h": 1, "v": -2})
        # h and v accept 0
        self.assertEqual(dict(fa.decode(fa.encode({"size": 1}))), {"h": 0, "v": 0, "size": 1})

    def test_unknown(self):
        with self.assertRaises(UnknownLayout) as cm:
            catalogue.layout("FocusSquare")
        self.assertEqual(cm.exception.errno, ERR_PARAM)

    def test_all_packed(self):
        cat = catalogue.get_catalogue()
        for l in cat.layouts():
            self.assertEqual(l.verify(), [], l.name)
            self.assertEqual(l.dtype.itemsize, l.size, l.name)
            self.assertEqual(ctypes.sizeof(l.ctype), l.size, l.name)

    def test_frame_guide(self):
        fg = catalogue.layout("FrameGuideGridInfo")
        self.assertEqual(fg.size, 56)
        self.assertTrue(fg.field("lGridH").is_array)
        # Unused lines are left to 0
        data = fg.encode({"lGridH": [256, 512, 768], "lLineColorIndex": 7})
        rec = fg.decode(data)
        self.assertEqual(rec["lGridH"], [256, 512, 768, 0, 0])
        self.assertEqual(rec["lGridV"], [0] * 5)
        self.assertEqual(rec["lLineColorIndex"], 7)
        self.assertRaises(ValueError, fg.encode, {"lGridH": [1024]})
        self.assertRaises(ValueError, fg.encode, {"lGridH": [1] * 6})

    def test_terminated_string(self):
        fi = catalogue.layout("FolderInfo")
        self.assertEqual(fi.size, 18)
        data = fi.encode({"pFoldernameSuffix": "FUJIF", "lFolderNumber": 100, "lStatus": 1})
        rec = fi.decode(data)
        self.assertEqual(rec["pFoldernameSuffix"], b"FUJIF")
        self.assertEqual(rec["lFolderNumber"], 100)
        self.assertEqual(data[5:6], b"\0")
        self.assertRaises(ValueError, fi.encode, {"pFoldernameSuffix": "FUJIFI"})

    def test_bytes_string(self):
        fi = catalogue.layout("FolderInfo")
        rec = {"pFoldernameSuffix": b"\xff\xfeAB", "lFolderNumber": 100,
               "lMaxFrameNumber": 999, "lStatus": 0}
        self.assertEqual(dict(fi.decode(fi.encode(rec))), rec)
        # str is stored as UTF-8
        rec = fi.decode(fi.encode({"pFoldernameSuffix": "\u00e9t\u00e9"}))
        self.assertEqual(rec["pFoldernameSuffix"], "\u00e9t\u00e9".encode("utf-8"))

    def test_nested(self):
        cap = catalogue.layout("AFZoneCustomCapability")
        self.assertEqual(cap.size, 20)
        data = cap.encode({"mode": 1, "min": {"h": 1, "v": 1}, "max": {"h": 7, "v": 7}})
        self.assertEqual(data, struct.pack("=iiiii", 1, 1, 1, 7, 7))
        rec = cap.decode(data)
        self.assertEqual(rec["max"]["h"], 7)
        self.assertEqual(cap.dtype["min"].itemsize, 8)

        c = cap.ctype.from_buffer_copy(data)
        self.assertEqual(c.max.v, 7)

    def test_array_of_records(self):
        fa = catalogue.layout("FocusArea")
        data = fa.encode({"h": 1, "v": -2, "size": 3}) + fa.encode({"h": -3, "v": 3, "size": 5})
        arr = fa.decode_array(data)
        self.assertEqual(arr.shape, (2,))
        numpy.testing.assert_array_equal(arr["h"], [1, -3])
        self.assertEqual(int(arr[1]["size"]), 5)
        self.assertEqual(len(fa.decode_array(data, count=1)), 1)
        self.assertRaises(ValueError, fa.decode_array, data[:-1])
        self.assertRaises(ValueError, fa.decode_array, data, count=3)


def random_record(layout):
    """
    returns (dict): a random value within range for every field of the layout
    """
    rec = {}
    for f in layout.fields:
        if f.fmt == "record":
            subs = [random_record(f.layout) for i in range(f.count)]
            rec[f.name] = subs if f.count > 1 else subs[0]
        elif f.fmt == FORMAT_STRING:
            maxlen = f.count - 1 if f.terminated else f.count
            n = random.randint(0, maxlen)
            rec[f.name] = bytes(random.randint(1, 255) for i in range(n))
        else:
            info = numpy.iinfo(f.fmt)
            low = info.min if f.minimum is None else max(info.min, f.minimum)
            high = info.max if f.maximum is None else min(info.max, f.maximum)
            vals = [random.randint(low, high) for i in range(f.count)]
            rec[f.name] = vals if f.count > 1 else vals[0]
    return rec


class TestRoundTrip(unittest.TestCase):

    def test_all_layouts(self):
        """
        Random values within range survive encoding and decoding, for every layout
        """
        random.seed(50)
        cat = catalogue.get_catalogue()
        for l in cat.layouts():
            self.assertEqual(l.size, sum(f.width for f in l.fields), l.name)
            for i in range(20):
                rec = random_record(l)
                data = l.encode(rec)
                self.assertEqual(len(data), l.size, l.name)
                self.assertEqual(l.decode(data), rec, l.name)


class TestLayouts(unittest.TestCase):

    def test_gap(self):
        fields = [Field("a", "i4", 0), Field("b", "i2", 6)]
        self.assertRaises(SemanticError, RecordLayout, "Gap", fields)
        l = RecordLayout("Gap", fields, size=8, strict=False)
        codes = [c for c, m in l.verify()]
        self.assertEqual(codes, ["layout-gap"])

    def test_size(self):
        fields = [Field("a", "i4", 0), Field("b", "u1", 4)]
        l = RecordLayout("Small", fields)
        self.assertEqual(l.size, 5)
        self.assertEqual(len(l), 5)
        l = RecordLayout("Big", fields, size=8, strict=False)
        self.assertEqual([c for c, m in l.verify()], ["layout-size"])

    def test_formats(self):
        self.assertRaises(SemanticError, Field, "a", "f4", 0)
        self.assertRaises(SemanticError, Field, "a", "record", 0)
        self.assertRaises(SemanticError, Field, "a", "i4", 0, count=0)
        l = RecordLayout("Mixed", [Field("a", "u1", 0), Field("b", "i8", 1), Field("c", "u2", 9)])
        data = l.encode({"a": 255, "b": -1, "c": 65535})
        self.assertEqual(data, struct.pack("=BqH", 255, -1, 65535))
        # Too big for the format
        self.assertRaises(ValueError, l.encode, {"a": 256})


if __name__ == "__main__":
    unittest.main()
