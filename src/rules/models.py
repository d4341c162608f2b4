from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from src.components.redirects.models import DuplicatePolicy


class RedirectSettings(BaseModel):
    enabled: bool = True
    # default | lowercase | identity
    standardizer: Literal["default", "lowercase", "identity"] = "default"
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.KEEP_IN_SCAN
    # Handed to the HTTP layer; the resolver itself never uses it
    status_code: Literal[301, 302] = 301
    legacy_lookup: bool = Field(default=False, description="Use the reduced find_old lookup")

    model_config = ConfigDict(extra="forbid")
