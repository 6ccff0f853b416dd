"""
Shared Models

Base classes for domain models with automatic ObjectId and Decimal128 handling.
Uses Pydantic v2's core schema system for seamless ObjectId serialization.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict
from bson import ObjectId
from bson.decimal128 import Decimal128
from pydantic import BaseModel, ConfigDict
from pydantic_core import core_schema


MONEY_QUANTUM = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """
    Round a monetary amount to 2 decimals, half up.

    Raises:
        decimal.InvalidOperation: value has more than 26 integer digits
    """
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


class PyObjectId(ObjectId):
    """
    Custom ObjectId type for Pydantic v2.

    Automatically handles ObjectId <-> string conversion in serialization/deserialization.
    """

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: Any
    ) -> core_schema.CoreSchema:
        """
        Generate Pydantic core schema for ObjectId.

        Handles:
        - String input -> ObjectId (validation)
        - ObjectId input -> ObjectId (pass through)
        - ObjectId output -> String (JSON serialization only; model_dump()
          keeps ObjectId so documents stay queryable)
        """
        return core_schema.json_or_python_schema(
            json_schema=core_schema.str_schema(),
            python_schema=core_schema.union_schema([
                core_schema.is_instance_schema(ObjectId),
                core_schema.chain_schema([
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(
                        lambda x: ObjectId(x) if isinstance(x, str) else x
                    ),
                ]),
            ]),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )


def to_bson(value: Any) -> Any:
    """Convert Decimals (recursively) to Decimal128 for Motor writes."""
    if isinstance(value, Decimal):
        return Decimal128(value)
    if isinstance(value, dict):
        return {k: to_bson(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_bson(v) for v in value]
    return value


def from_bson(value: Any) -> Any:
    """Convert Decimal128 values (recursively) back to Decimal."""
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, dict):
        return {k: from_bson(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_bson(v) for v in value]
    return value


class DomainModel(BaseModel):
    """
    Base domain model for all domain entities.

    Provides:
    - Automatic ObjectId handling via PyObjectId
    - Decimal128 <-> Decimal conversion for MongoDB documents
    - Proper Pydantic v2 configuration
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        use_enum_values=True,
    )

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        """Build the model from a raw MongoDB document."""
        return cls.model_validate(from_bson(document))

    def to_document(self) -> Dict[str, Any]:
        """Dump the model as a MongoDB document (``_id`` omitted when unset)."""
        document = self.model_dump(by_alias=True, exclude_none=False)
        if document.get("_id") is None:
            document.pop("_id", None)
        return to_bson(document)
