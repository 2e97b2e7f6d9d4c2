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
import pickle
import unittest

from xsdk.catalogue import Supported, UNSUPPORTED, from_int, OperationUnsupported, \
    ERR_UNSUPPORTED

logging.basicConfig(format="%(asctime)s  %(levelname)-7s %(module)-15s: %(message)s")
logging.getLogger().setLevel(logging.DEBUG)


class TestArity(unittest.TestCase):

    def test_legacy_encoding(self):
        self.assertIs(from_int(-1), UNSUPPORTED)
        self.assertEqual(from_int(-1), -1)
        self.assertEqual(from_int(0), 0)
        self.assertEqual(from_int(6), Supported(6))
        self.assertEqual(int(from_int(3)), 3)
        self.assertNotEqual(from_int(1), UNSUPPORTED)
        self.assertNotEqual(Supported(1), True)

    def test_invalid(self):
        self.assertRaises(ValueError, from_int, -2)
        self.assertRaises(ValueError, from_int, "1")
        self.assertRaises(ValueError, from_int, True)
        self.assertRaises(ValueError, Supported, -1)

    def test_require(self):
        self.assertTrue(Supported(0).supported)
        self.assertEqual(Supported(2).require("SetFocusArea"), 2)
        self.assertFalse(UNSUPPORTED.supported)
        with self.assertRaises(OperationUnsupported) as cm:
            UNSUPPORTED.require("SetMacroMode")
        self.assertEqual(cm.exception.errno, ERR_UNSUPPORTED)
        self.assertIn("SetMacroMode", str(cm.exception))

    def test_hash(self):
        d = {Supported(1): "one", UNSUPPORTED: "none"}
        self.assertEqual(d[1], "one")
        self.assertEqual(d[-1], "none")
        self.assertIs(pickle.loads(pickle.dumps(UNSUPPORTED)), UNSUPPORTED)


if __name__ == "__main__":
    unittest.main()
