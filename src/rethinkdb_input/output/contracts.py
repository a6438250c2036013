from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

JSON_TYPE = "json"


class SchemaColumn(BaseModel):
    """Column metadata for the output schema."""

    name: str
    type: str = Field(default=JSON_TYPE, description="Logical column type.")

    model_config = ConfigDict(frozen=True)


class Schema(BaseModel):
    """Output schema. The connector always produces exactly one JSON column."""

    columns: List[SchemaColumn]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def single_json_column(cls, name: str) -> "Schema":
        return cls(columns=[SchemaColumn(name=name, type=JSON_TYPE)])

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]


class ResultFrame(BaseModel):
    """Collected records, DataFrame-like: column list plus row values."""

    columns: List[SchemaColumn] = Field(default_factory=list)
    rows: List[List[Any]] = Field(default_factory=list)
    row_count: int = Field(default=0)
    finished: bool = Field(default=False)

    model_config = ConfigDict(extra="ignore")


class TaskReport(BaseModel):
    """Per-task completion report. Carries no checkpoint or offset."""

    task_index: int
    record_count: int = 0

    model_config = ConfigDict(frozen=True)


class ConfigDiff(BaseModel):
    """Config changes to persist for the next run; always empty for this connector."""

    values: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
