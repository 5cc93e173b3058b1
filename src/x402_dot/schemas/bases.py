"""
Base Schema Models for x402-dot

Defines the base model every schema inherits from. It provides consistent
validation and a deterministic JSON form used for logging and comparison.

Core Classes:
    - CanonicalModel: Pydantic base model with canonical JSON serialization

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from pydantic import BaseModel, ConfigDict


class CanonicalModel(BaseModel):
    """
    Pydantic base model with canonical JSON serialization.

    Models are frozen: once a challenge or profile is parsed its values can no
    longer change, so the same instance can be safely passed between the
    negotiator, the signer and event observers.

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        canonical_json = model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to canonical JSON string.

        Keys are sorted and whitespace is removed so that equal models always
        produce identical strings.

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )
