# apps/api/schemas.py
# PL: Schematy Pydantic do API kalkulatora. EN: Pydantic schemas for the calculator API.

from pydantic import BaseModel, Field
from typing import Optional, List


class FieldEditReq(BaseModel):
    value: Optional[str] = None


class LeverageReq(BaseModel):
    leverage: float = Field(gt=0)


class CalculatorInputs(BaseModel):
    risk_usd: Optional[str] = None
    entry_price: Optional[str] = None
    stop_loss: Optional[str] = None
    fee_percent: Optional[str] = None
    margin: Optional[str] = None


class CalculatorOutputs(BaseModel):
    position_size_crypto: Optional[str] = None
    position_size_usd: Optional[str] = None
    margin: Optional[str] = None
    leverage: str = "0.0x"
    liquidation_price: Optional[str] = None
    is_liquidation_safe: Optional[bool] = None


class CalculatorView(BaseModel):
    inputs: CalculatorInputs
    outputs: CalculatorOutputs
    locked: List[str] = []


class EditResult(BaseModel):
    accepted: bool
    state: CalculatorView


class LockResult(BaseModel):
    locked: bool
    state: CalculatorView


class TierOut(BaseModel):
    notional_limit: float
    maintenance_margin_rate: float
    deduction: float
    max_leverage: int
