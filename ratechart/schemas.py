"""Schemas for API requests and responses."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class HealthStatusSchema(Schema):
    status = fields.String(required=True)
    app = fields.String()


class CurrencyOptionSchema(Schema):
    id = fields.String(required=True, attribute="currency_id")
    name = fields.String(required=True)
    selected = fields.Boolean(required=True)


class SelectionSchema(Schema):
    currency_id = fields.String(required=True)
    currency_name = fields.String(required=True)
    start_date = fields.String(required=True)
    end_date = fields.String(required=True)
    start_max = fields.String(allow_none=True)
    end_min = fields.String(allow_none=True)
    end_max = fields.String(allow_none=True)


class SelectionStateSchema(Schema):
    selection = fields.Nested(SelectionSchema, required=True)
    currencies = fields.List(fields.Nested(CurrencyOptionSchema), required=True)
    outcome = fields.String(allow_none=True)
    sequence = fields.Integer(required=True)


class CurrencyChoiceRequestSchema(Schema):
    id = fields.String(required=True, validate=validate.Length(min=1))
    name = fields.String(load_default=None)


class DateChangeRequestSchema(Schema):
    value = fields.String(required=True)


class ChartSchema(Schema):
    status = fields.String(required=True)
    labels = fields.List(fields.String(), required=True)
    data = fields.List(fields.Float(), required=True)
    label = fields.String(allow_none=True)
    sequence = fields.Integer(allow_none=True)
    error = fields.String(allow_none=True)
