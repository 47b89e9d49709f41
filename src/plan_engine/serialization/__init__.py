"""Serialization module: persistence records for plans and projections."""

from plan_engine.serialization.records import (
    calendar_to_record,
    framework_to_record,
    instance_to_record,
    plan_to_record,
    targets_to_records,
    template_to_record,
    to_json_string,
)

__all__ = [
    "calendar_to_record",
    "framework_to_record",
    "instance_to_record",
    "plan_to_record",
    "targets_to_records",
    "template_to_record",
    "to_json_string",
]
