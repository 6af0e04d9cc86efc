"""
ontogen.options — Generation options.
"""

from __future__ import annotations

import keyword
import re

from pydantic import BaseModel, field_validator

_DSL_NAME = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


class GenerationOptions(BaseModel):
    dsl_name: str
    package_name: str
    validation_enabled: bool = True
    support_language_tags: bool = False
    include_docs: bool = True

    @field_validator("dsl_name")
    @classmethod
    def _check_dsl_name(cls, value: str) -> str:
        if not _DSL_NAME.fullmatch(value) or keyword.iskeyword(value):
            raise ValueError("dsl_name must be a valid identifier starting with a letter")
        return value

    @field_validator("package_name")
    @classmethod
    def _check_package_name(cls, value: str) -> str:
        parts = value.split(".")
        for part in parts:
            if not part.isidentifier() or keyword.iskeyword(part):
                raise ValueError(f"package_name segment '{part}' is not a valid module name")
        return value

    @property
    def package_path(self) -> str:
        return self.package_name.replace(".", "/")
