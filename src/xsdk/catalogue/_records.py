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
# Byte layouts of the compound records exchanged with the camera.
# Every record is packed (no padding), in native endianness, and each field
# is at an offset declared in the data files. The codec uses struct with
# explicit offsets, the numpy dtype serves arrays of records (lists returned
# by the camera) and the ctypes structure is only a convenience for calling
# native code.

from collections import OrderedDict
import ctypes
import logging
import numpy
import struct
import threading

from ._core import SemanticError

# format name -> (struct code, numpy code, ctypes type, size)
FORMATS = {
    "i1": ("b", "i1", ctypes.c_int8, 1),
    "u1": ("B", "u1", ctypes.c_uint8, 1),
    "i2": ("h", "i2", ctypes.c_int16, 2),
    "u2": ("H", "u2", ctypes.c_uint16, 2),
    "i4": ("i", "i4", ctypes.c_int32, 4),
    "u4": ("I", "u4", ctypes.c_uint32, 4),
    "i8": ("q", "i8", ctypes.c_int64, 8),
    "u8": ("Q", "u8", ctypes.c_uint64, 8),
}
# Byte string, of "count" bytes, zero padded
FORMAT_STRING = "S"

STRING_ENCODING = "utf-8"


class Field(object):
    """
    One field of a record
    """

    def __init__(self, name, fmt, offset, count=1, role=None, minimum=None, maximum=None,
                 terminated=False, layout=None):
        """
        name (str)
        fmt (str): one of FORMATS, FORMAT_STRING, or "record" (then layout is needed)
        offset (int): position of the first byte in the record
        count (int): number of elements (for arrays), or of bytes for strings
        role (str or None): what the field means, for documentation
        minimum, maximum (int or None): closed range of each element
        terminated (bool): for strings, the last byte must stay zero
        layout (RecordLayout or None): for nested records
        """
        if fmt == "record":
            if layout is None:
                raise SemanticError("Field %s is a record without layout" % (name,))
        elif fmt != FORMAT_STRING and fmt not in FORMATS:
            raise SemanticError("Field %s has unknown format %r" % (name, fmt))
        if count < 1:
            raise SemanticError("Field %s has count %d" % (name, count))
        self.name = name
        self.fmt = fmt
        self.offset = offset
        self.count = count
        self.role = role
        self.minimum = minimum
        self.maximum = maximum
        self.terminated = terminated
        self.layout = layout

    def __repr__(self):
        return "Field(%s, %s, @%d)" % (self.name, self.fmt, self.offset)

    @property
    def width(self):
        """
        Number of bytes used by the field in the record
        """
        if self.fmt == FORMAT_STRING:
            return self.count
        elif self.fmt == "record":
            return self.layout.size * self.count
        return FORMATS[self.fmt][3] * self.count

    @property
    def is_array(self):
        return self.fmt != FORMAT_STRING and self.count > 1

    def struct_format(self):
        if self.fmt == FORMAT_STRING:
            return "%ds" % (self.count,)
        return "%d%s" % (self.count, FORMATS[self.fmt][0])

    def numpy_format(self):
        if self.fmt == FORMAT_STRING:
            return "S%d" % (self.count,)
        elif self.fmt == "record":
            base = self.layout.dtype
        else:
            base = "=" + FORMATS[self.fmt][1]
        if self.count > 1:
            return (base, (self.count,))
        return base

    def ctype(self):
        if self.fmt == FORMAT_STRING:
            return ctypes.c_char * self.count
        elif self.fmt == "record":
            base = self.layout.ctype
        else:
            base = FORMATS[self.fmt][2]
        if self.count > 1:
            return base * self.count
        return base

    def check(self, value):
        """
        Check one element is within the range of the field
        raises ValueError: if it's not
        """
        if self.minimum is not None and value < self.minimum:
            raise ValueError("Field %s must be >= %d, got %d" % (self.name, self.minimum, value))
        if self.maximum is not None and value > self.maximum:
            raise ValueError("Field %s must be <= %d, got %d" % (self.name, self.maximum, value))


class RecordLayout(object):
    """
    Packed layout of a record, with an explicit codec
    """

    def __init__(self, name, fields, size=None, doc=None, strict=True):
        """
        name (str)
        fields (list of Field): in order of offsets
        size (int or None): declared size in bytes. If None, it's computed.
        strict (bool): if True, raise SemanticError on the first inconsistency
          instead of only reporting it with verify().
        raises SemanticError: if strict and the fields leave gaps or the size is wrong
        """
        self.name = name
        self.fields = tuple(fields)
        self.doc = doc
        self._field_by_name = OrderedDict()
        for f in self.fields:
            if f.name in self._field_by_name:
                raise SemanticError("Layout %s has field %s twice" % (name, f.name))
            self._field_by_name[f.name] = f
        computed = sum(f.width for f in self.fields)
        self.declared_size = size
        self.size = computed if size is None else size

        if strict:
            problems = self.verify()
            if problems:
                raise SemanticError("Layout %s is not packed: %s" % (name, problems[0][1]))

        self._dtype = None
        self._ctype = None
        self._lock = threading.Lock()

    def __repr__(self):
        return "RecordLayout(%s, %d bytes)" % (self.name, self.size)

    def __len__(self):
        return self.size

    def verify(self):
        """
        returns (list of (str, str)): problem code, message. The code is
          "layout-gap" or "layout-size". Empty if the layout is packed.
        """
        problems = []
        expected = 0
        for f in self.fields:
            if f.offset != expected:
                problems.append(("layout-gap", "field %s is at offset %d, but should be at %d" %
                                 (f.name, f.offset, expected)))
            expected = f.offset + f.width
        if self.declared_size is not None and self.declared_size != expected:
            problems.append(("layout-size", "declared size is %d bytes, but fields use %d" %
                             (self.declared_size, expected)))
        return problems

    def field(self, name):
        return self._field_by_name[name]

    @property
    def field_names(self):
        return tuple(self._field_by_name.keys())

    def encode(self, values):
        """
        Serialize a record
        values (mapping str -> value): field name -> value. Missing fields are
          set to 0 (or empty), if 0 is within their range. Arrays can be given
          shorter, they are padded with 0. Strings are bytes, or str which is
          encoded in UTF-8.
        returns (bytes): exactly size bytes
        raises ValueError: if a field is unknown, out of range or too long
        """
        unknown = set(values) - set(self._field_by_name)
        if unknown:
            raise ValueError("Layout %s has no field %s" % (self.name, ", ".join(sorted(unknown))))

        buf = bytearray(self.size)
        for f in self.fields:
            v = values.get(f.name)
            self._encode_field(f, v, buf)
        return bytes(buf)

    def _encode_field(self, f, v, buf):
        if f.fmt == FORMAT_STRING:
            if v is None:
                v = b""
            elif not isinstance(v, bytes):
                v = str(v).encode(STRING_ENCODING)
            maxlen = f.count - 1 if f.terminated else f.count
            if len(v) > maxlen:
                raise ValueError("Field %s accepts at most %d bytes, got %d" %
                                 (f.name, maxlen, len(v)))
            struct.pack_into("=" + f.struct_format(), buf, f.offset, v)
            return

        if f.count > 1:
            seq = list(v) if v is not None else []
            if len(seq) > f.count:
                raise ValueError("Field %s has %d elements, got %d" % (f.name, f.count, len(seq)))
            seq.extend([None] * (f.count - len(seq)))
        else:
            seq = [v]

        if f.fmt == "record":
            for i, sub in enumerate(seq):
                if sub is None and f.count > 1:
                    continue  # absent array element, left as zeros
                data = f.layout.encode(sub or {})
                pos = f.offset + i * f.layout.size
                buf[pos:pos + f.layout.size] = data
            return

        elements = []
        for e in seq:
            if e is None:
                # a missing scalar is written as 0, which must be within range
                if f.count == 1:
                    f.check(0)
                elements.append(0)
                continue
            if isinstance(e, bool) or not isinstance(e, (int, numpy.integer)):
                raise ValueError("Field %s needs integers, got %r" % (f.name, e))
            e = int(e)
            if f.count == 1 or e != 0:  # 0 marks an absent array element
                f.check(e)
            elements.append(e)
        try:
            struct.pack_into("=" + f.struct_format(), buf, f.offset, *elements)
        except struct.error as ex:
            raise ValueError("Field %s cannot hold %s: %s" % (f.name, elements, ex))

    def decode(self, data):
        """
        Deserialize a record
        data (bytes): exactly size bytes
        returns (OrderedDict str -> value): arrays are lists, strings are bytes
          (up to the first zero byte), nested records are OrderedDict.
        raises ValueError: if the length is wrong
        """
        data = bytes(data)
        if len(data) != self.size:
            raise ValueError("Layout %s needs %d bytes, got %d" % (self.name, self.size, len(data)))
        rec = OrderedDict()
        for f in self.fields:
            if f.fmt == "record":
                subs = [f.layout.decode(data[f.offset + i * f.layout.size:
                                             f.offset + (i + 1) * f.layout.size])
                        for i in range(f.count)]
                rec[f.name] = subs if f.count > 1 else subs[0]
                continue
            v = struct.unpack_from("=" + f.struct_format(), data, f.offset)
            if f.fmt == FORMAT_STRING:
                rec[f.name] = v[0].split(b"\0", 1)[0]
            elif f.count > 1:
                rec[f.name] = list(v)
            else:
                rec[f.name] = v[0]
        return rec

    @property
    def dtype(self):
        """
        numpy structured dtype with the declared offsets and size
        """
        if self._dtype is None:
            self._dtype = numpy.dtype({"names": [f.name for f in self.fields],
                                       "formats": [f.numpy_format() for f in self.fields],
                                       "offsets": [f.offset for f in self.fields],
                                       "itemsize": self.size})
        return self._dtype

    def decode_array(self, data, count=None):
        """
        Deserialize consecutive records (eg, a list returned by the camera)
        data (bytes): multiple of size bytes
        count (int or None): number of records to read, if None all the buffer
        returns (numpy.ndarray of dtype): read-only view of the data
        raises ValueError: if the buffer is not a multiple of the record size
        """
        if count is None:
            if len(data) % self.size:
                raise ValueError("Buffer of %d bytes is not a multiple of %s (%d bytes)" %
                                 (len(data), self.name, self.size))
            count = len(data) // self.size
        elif count * self.size > len(data):
            raise ValueError("Buffer of %d bytes too small for %d %s" %
                             (len(data), count, self.name))
        return numpy.frombuffer(data, dtype=self.dtype, count=count)

    @property
    def ctype(self):
        """
        ctypes Structure equivalent to the layout
        """
        with self._lock:
            if self._ctype is None:
                fields = [(f.name, f.ctype()) for f in self.fields]
                cls = type(str("SDK_" + self.name), (ctypes.Structure,),
                           {"_pack_": 1, "_fields_": fields})
                if ctypes.sizeof(cls) != self.size:
                    raise SemanticError("Native structure of %s is %d bytes instead of %d" %
                                        (self.name, ctypes.sizeof(cls), self.size))
                logging.debug("Created native structure for %s", self.name)
                self._ctype = cls
            return self._ctype

# vim:tabstop=4:shiftwidth=4:expandtab:spelllang=en_gb:spell:
