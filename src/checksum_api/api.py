from dataclasses import asdict

from fastapi import FastAPI, APIRouter, HTTPException
import structlog

from checksum_tickler.algorithm.checksum import compute_checksum
from checksum_tickler.algorithm.verification import flip_bit, trace_verification, verify
from checksum_tickler.models.block import BitIndexError, BlockFormatError, EmptyBlockSequenceError
from checksum_tickler.utils import SAMPLE_BLOCKS, build_transmission, describe_flip, format_sequence

from . import models

log = structlog.get_logger(
    processors=[
        structlog.processors.JSONRenderer(indent=2),
    ],
)

CONTRACT_ERRORS = (BlockFormatError, EmptyBlockSequenceError, BitIndexError)

# Create the FastAPI app
app = FastAPI(title="One's Complement Checksum API")

# Create the router for API endpoints
router = APIRouter()


def reject(event: str, error: Exception, **kw) -> HTTPException:
    log.warning(event, error=str(error), **kw)
    return HTTPException(status_code=400, detail=f"{error}")


def to_step_models(steps) -> list[models.CalculationStepModel]:
    return [models.CalculationStepModel(**asdict(step)) for step in steps]


@router.get("/sample", response_model=models.SampleResponse)
def sample():
    """ The three demonstration blocks. """
    return models.SampleResponse(blocks=[block.as_binary() for block in SAMPLE_BLOCKS])


@router.post("/checksum", response_model=models.ChecksumResponse)
def checksum(req: models.ChecksumRequest):
    """ Calculate the checksum of the given blocks along with every intermediate step. """
    try:
        result = compute_checksum(req.blocks)
    except CONTRACT_ERRORS as e:
        raise reject("checksum rejected", e, blocks=req.blocks)

    log.info("checksum calculated", blocks=req.blocks, total=result.total, checksum=result.checksum)
    return models.ChecksumResponse(
        checksum=result.checksum,
        total=result.total,
        steps=to_step_models(result.steps),
        transmission=build_transmission(req.blocks, result.checksum),
    )


@router.post("/verify", response_model=models.VerifyResponse)
def verify_api(req: models.VerifyRequest):
    """ Verify a received sequence, checksum last. """
    try:
        outcome = verify(req.sequence)
        steps = trace_verification(req.sequence)
    except CONTRACT_ERRORS as e:
        raise reject("verification rejected", e, sequence=req.sequence)

    log.info("verified", sequence=req.sequence, received_sum=outcome.received_sum, is_valid=outcome.is_valid)
    return models.VerifyResponse(
        is_valid=outcome.is_valid,
        received_sum=outcome.received_sum,
        message=outcome.message,
        steps=to_step_models(steps),
    )


@router.post("/flip", response_model=models.FlipResponse)
def flip(req: models.FlipRequest):
    """ Invert one bit of one block to simulate a transmission error. """
    try:
        flipped = flip_bit(req.sequence, req.block_index, req.bit_index)
    except CONTRACT_ERRORS as e:
        raise reject("flip rejected", e, block_index=req.block_index, bit_index=req.bit_index)

    note = describe_flip(req.block_index, req.bit_index)
    log.info("bit flipped", note=note)
    return models.FlipResponse(
        sequence=[block.as_binary() for block in flipped],
        transmission=format_sequence(flipped),
        note=note,
    )


# Include the router in the app (after all routes are defined)
app.include_router(router, prefix="/api")
