#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the File Store API.

- Base: declarative base for every table
- BaseModel: kwargs constructor and a to_dict() that formats timestamps and removes SA internals

Primary keys are declared per model: users are keyed by their login id
(phone number or email), files by a store-assigned integer.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import declarative_base

TIME_FMT = "%Y-%m-%d %H:%M:%S"

# Declarative base for all models
Base = declarative_base()


class BaseModel:
    """
    Base mixin for all persistent models.
    """

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

    def to_dict(self) -> dict:
        """
        Dictionary of column values:
        - datetimes formatted with TIME_FMT
        - SQLAlchemy internal state and password hashes removed
        """
        d = {k: v for k, v in self.__dict__.items() if k != "_sa_instance_state"}
        for key, value in list(d.items()):
            if isinstance(value, datetime):
                d[key] = value.strftime(TIME_FMT)
        d.pop("password_hash", None)
        d["__class__"] = self.__class__.__name__
        return d
