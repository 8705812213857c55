"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

PASSWORD_MIN_LENGTH = 8


class SignUpSchema(Schema):
    """Input payload for account creation."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True, validate=validate.Length(min=PASSWORD_MIN_LENGTH, max=128)
    )
    name = fields.String(load_default=None, allow_none=True, validate=validate.Length(max=100))


class SignInSchema(Schema):
    """Input payload for password sign-in."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Input payload for exchanging a refresh token."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=4096))


class TokenResponseSchema(Schema):
    """Response payload carrying a token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    expires_in = fields.Integer(required=True)
    user_id = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")


class WhoAmISchema(Schema):
    """Response payload exposing identity details for the authenticated user."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    name = fields.String(allow_none=True)
