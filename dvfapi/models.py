from __future__ import annotations

import string

from pydantic import BaseModel, Field, field_validator


class SignedMessage(BaseModel):
    signature: str = Field(..., description="Labelled hex R || S")
    public_key: str = Field(..., description="Hex X || Y")

    @field_validator("public_key")
    @classmethod
    def check_hex(cls, v: str) -> str:
        if not v or len(v) % 2 or any(c not in string.hexdigits for c in v):
            raise ValueError("public_key must be an even-length hex string")
        return v

    @property
    def signature_hex(self) -> str:
        """Signature without its label."""
        return self.signature.rsplit(" ", 1)[-1]
