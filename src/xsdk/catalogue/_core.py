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
# Exceptions and result codes shared by all the parts of the catalogue

import re

# SDK result codes, as returned by the camera-control library
ERR_NOERR = 0x0000
ERR_SEQUENCE = 0x1001
ERR_PARAM = 0x1002
ERR_INVALID_CAMERA = 0x1003
ERR_LOADLIB = 0x1004
ERR_UNSUPPORTED = 0x1005
ERR_BUSY = 0x1006
ERR_API_NOTFOUND = 0x1013
ERR_API_MISMATCH = 0x1014

ERROR_CODES = {
    0x0000: "NOERR",
    0x1001: "SEQUENCE",
    0x1002: "PARAM",
    0x1003: "INVALID_CAMERA",
    0x1004: "LOADLIB",
    0x1005: "UNSUPPORTED",
    0x1006: "BUSY",
    0x1007: "AF_TIMEOUT",
    0x1008: "SHOOT_ERROR",
    0x1009: "FRAME_FULL",
    0x1010: "STANDBY",
    0x1011: "NODRIVER",
    0x1012: "NO_MODEL_MODULE",
    0x1013: "API_NOTFOUND",
    0x1014: "API_MISMATCH",
    0x1015: "INVALID_USBMODE",
    0x1016: "FORCEMODE_BUSY",
    0x1017: "RUNNING_OTHER_FUNCTION",
    0x2001: "COMMUNICATION",
    0x2002: "TIMEOUT",
    0x2003: "COMBINATION",
    0x2004: "WRITEERROR",
    0x2005: "CARDFULL",
    0x3001: "HARDWARE",
    0x9001: "INTERNAL",
    0x9002: "MEMFULL",
    0x9100: "UNKNOWN",
}


def error_name(errno):
    """
    errno (int): SDK result code
    returns (str): the name of the code, or "UNKNOWN(0x....)" if not known
    """
    try:
        return ERROR_CODES[errno]
    except KeyError:
        return "UNKNOWN(0x%04X)" % (errno,)


class CatalogueError(LookupError):
    """
    Base of all the lookup failures of the catalogue.
    They are programmer errors: the published set is known when building.
    """
    errno = ERR_PARAM

    def __init__(self, msg, errno=None):
        super(CatalogueError, self).__init__(msg)
        if errno is not None:
            self.errno = errno

    def __str__(self):
        return "%s (%s)" % (self.args[0], error_name(self.errno))


class UnknownOperation(CatalogueError):
    errno = ERR_API_NOTFOUND


class UnknownEnumValue(CatalogueError):
    errno = ERR_PARAM


class UnknownLayout(CatalogueError):
    errno = ERR_PARAM


class OperationUnsupported(CatalogueError):
    """
    The operation exists, but the device (view) marks it as not implemented
    """
    errno = ERR_UNSUPPORTED


class UnsupportedInView(OperationUnsupported):
    """
    The operation is not part of the view, or the view tags it unsupported
    """
    pass


# Raised while reading the data files
class ParseError(Exception):
    pass


class SemanticError(Exception):
    pass


def normalize_name(name):
    """
    Key used to compare value names: case doesn't matter.
    name (str or int)
    returns (str)
    """
    return str(name).strip().upper()


def normalize_domain(name):
    """
    Key used to compare domain names: case and underscores don't matter.
    So "FilmSimulation", "FILMSIMULATION" and "film_simulation" are the same.
    """
    return re.sub(r"[\s_]", "", str(name)).upper()


# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
