"""
ParamType enumeration describing where a request parameter lives.
"""

from enum import Enum


class ParamType(str, Enum):
    """Location of a validated parameter inside an HTTP request."""

    PATH = "PATH"
    QUERY_PARAM = "QUERY_PARAM"
    BODY = "BODY"
    HEADER = "HEADER"
