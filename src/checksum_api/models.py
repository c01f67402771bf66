from typing import List

from pydantic import BaseModel


class SampleResponse(BaseModel):
    blocks: List[str]


class ChecksumRequest(BaseModel):
    blocks: List[str]


class CalculationStepModel(BaseModel):
    step: int
    description: str
    operand1: str
    operand2: str
    result: str
    carry: str


class ChecksumResponse(BaseModel):
    checksum: str
    total: str
    steps: List[CalculationStepModel]
    transmission: str


class VerifyRequest(BaseModel):
    sequence: List[str]


class VerifyResponse(BaseModel):
    is_valid: bool
    received_sum: str
    message: str
    steps: List[CalculationStepModel]


class FlipRequest(BaseModel):
    sequence: List[str]
    block_index: int
    bit_index: int


class FlipResponse(BaseModel):
    sequence: List[str]
    transmission: str
    note: str
