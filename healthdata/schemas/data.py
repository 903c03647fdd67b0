from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

CODE_PATTERN = r"^[A-Z0-9_]+$"


# ---- Categories ----------------------------------------------------------------------


class CategoryCreate(BaseModel):
    code: str = Field(min_length=3, max_length=50, pattern=CODE_PATTERN)
    designation: str = Field(min_length=3, max_length=100)


class CategoryUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=3, max_length=50, pattern=CODE_PATTERN)
    designation: str | None = Field(default=None, min_length=3, max_length=100)


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    designation: str | None
    created_at: datetime
    updated_at: datetime


# ---- Organizations -------------------------------------------------------------------


class OrganizationCreate(BaseModel):
    code: str = Field(min_length=3, max_length=50, pattern=CODE_PATTERN)
    name: str = Field(min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    data_manager_id: str | None = None


class OrganizationUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=3, max_length=50, pattern=CODE_PATTERN)
    name: str | None = Field(default=None, min_length=3, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    data_manager_id: str | None = None


class OrganizationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: str | None
    data_manager_id: str | None
    created_at: datetime
    updated_at: datetime


# ---- Sources -------------------------------------------------------------------------


class SourceCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50, pattern=CODE_PATTERN)
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    url: str | None = Field(default=None, max_length=500)


class SourceUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50, pattern=CODE_PATTERN)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    url: str | None = Field(default=None, max_length=500)


class SourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: str | None
    url: str | None
    created_at: datetime
    updated_at: datetime


# ---- Variables -----------------------------------------------------------------------


class VariableCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    designation: str | None = None
    data_source_id: int = Field(gt=0)
    category_code: str = Field(min_length=1)
    frequency: str | None = None
    level: str | None = None


class VariableUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    designation: str | None = None
    data_source_id: int | None = Field(default=None, gt=0)
    category_code: str | None = Field(default=None, min_length=1)
    frequency: str | None = None
    level: str | None = None


class VariableOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    designation: str | None
    data_source_id: int
    category_code: str
    frequency: str | None
    level: str | None
    created_at: datetime
    updated_at: datetime


# ---- Indicators ----------------------------------------------------------------------


class IndicatorCreate(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    category_code: str = Field(min_length=1)
    designation: str | None = None
    definition: str | None = None
    goal: str | None = None
    formula: str | None = None
    level: str | None = None
    calculation_method: str | None = None
    collection_frequency: str | None = None
    interpretation: str | None = None


class IndicatorUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    category_code: str | None = Field(default=None, min_length=1)
    designation: str | None = None
    definition: str | None = None
    goal: str | None = None
    formula: str | None = None
    level: str | None = None
    calculation_method: str | None = None
    collection_frequency: str | None = None
    interpretation: str | None = None


class IndicatorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    category_code: str
    designation: str | None
    definition: str | None
    goal: str | None
    formula: str | None
    level: str | None
    calculation_method: str | None
    collection_frequency: str | None
    interpretation: str | None
    created_at: datetime
    updated_at: datetime


# ---- Entries -------------------------------------------------------------------------


class EntryCreate(BaseModel):
    variable_code: str
    category_code: str
    organization_element_code: str
    value: float | None = None
    valid: bool = False
    year: int | None = None
    period: str | None = None


class EntryUpdate(BaseModel):
    variable_code: str | None = None
    category_code: str | None = None
    organization_element_code: str | None = None
    value: float | None = None
    valid: bool | None = None
    year: int | None = None
    period: str | None = None


class EntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    variable_code: str
    category_code: str
    organization_element_code: str
    value: float | None
    valid: bool
    year: int | None
    period: str | None
    created_at: datetime
    updated_at: datetime
