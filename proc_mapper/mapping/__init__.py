"""Mapping layer - assign result columns to target members."""

from __future__ import annotations

from proc_mapper.mapping.members import MemberInfo, describe_member, is_compatible
from proc_mapper.mapping.model import RowMapper
from proc_mapper.mapping.protocol import Mapper

__all__ = [
    "RowMapper",
    "Mapper",
    "MemberInfo",
    "describe_member",
    "is_compatible",
]
