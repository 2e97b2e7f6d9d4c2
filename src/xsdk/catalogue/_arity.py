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
# Parameter count of an operation, as declared by a model view.
# A view either gives the number of scalar slots of the request, or tags the
# operation as not implemented on the device (the legacy -1).

from ._core import OperationUnsupported


class Arity(object):
    """
    Base class for the two arity values: Supported(n) and UNSUPPORTED.
    Compares equal to the legacy integer encoding, so that
    view.arity("SetMacroMode") == -1 holds.
    """
    supported = False

    def __int__(self):
        raise NotImplementedError()

    def __eq__(self, other):
        if isinstance(other, Arity):
            return int(self) == int(other)
        if isinstance(other, int) and not isinstance(other, bool):
            return int(self) == other
        return NotImplemented

    def __ne__(self, other):
        eq = self.__eq__(other)
        if eq is NotImplemented:
            return eq
        return not eq

    def __hash__(self):
        return hash(int(self))

    def require(self, opname):
        """
        Check the operation can be sent
        opname (str): name used in the error message
        returns (int): number of parameter slots
        raises OperationUnsupported: if the operation is not implemented
        """
        raise NotImplementedError()


class Supported(Arity):
    supported = True

    def __init__(self, count):
        count = int(count)
        if count < 0:
            raise ValueError("Parameter count must be positive, got %d" % (count,))
        self.count = count

    def __int__(self):
        return self.count

    def __repr__(self):
        return "Supported(%d)" % (self.count,)

    def require(self, opname):
        return self.count


class _Unsupported(Arity):

    def __int__(self):
        return -1

    def __repr__(self):
        return "UNSUPPORTED"

    def __reduce__(self):
        return "UNSUPPORTED"

    def require(self, opname):
        raise OperationUnsupported("Operation %s is not supported by the device" % (opname,))


UNSUPPORTED = _Unsupported()


def from_int(n):
    """
    Converts the legacy encoding to an Arity
    n (int): >= 0 for a parameter count, -1 for unsupported
    returns (Arity)
    raises ValueError: if n is not a legal arity
    """
    if isinstance(n, Arity):
        return n
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError("Arity must be an integer, got %r" % (n,))
    if n == -1:
        return UNSUPPORTED
    elif n >= 0:
        return Supported(n)
    raise ValueError("Arity %d is neither a parameter count nor -1" % (n,))

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
