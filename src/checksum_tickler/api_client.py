from typing import Any, Dict, Iterable, Tuple

import requests
import structlog

from checksum_tickler.models.block import Block, BlockLike, as_blocks
from checksum_tickler.models.results import CalculationStep, ChecksumResult, VerificationOutcome

log = structlog.get_logger()

DEFAULT_ENDPOINT = "http://127.0.0.1:8000/api"
REQUEST_TIMEOUT = 10


def _check(response: requests.Response, url: str) -> Dict[str, Any]:
    if response.status_code != 200:
        raise ValueError(f"Failed to get {url}: {response.status_code} {response.text}")
    return response.json()


def _post(endpoint: str, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    url = f"{endpoint.rstrip('/')}/{path}"
    log.debug("api request", url=url)
    response = requests.post(url, json=payload, timeout=REQUEST_TIMEOUT)
    return _check(response, url)


def _binary(blocks: Iterable[BlockLike]) -> list[str]:
    return [block.as_binary() for block in as_blocks(blocks)]


def fetch_sample(endpoint: str = DEFAULT_ENDPOINT) -> Tuple[Block, ...]:
    """ Fetch the demonstration blocks from the API. """
    url = f"{endpoint.rstrip('/')}/sample"
    response = requests.get(url, timeout=REQUEST_TIMEOUT)
    data = _check(response, url)
    return as_blocks(data["blocks"])


def remote_checksum(blocks: Iterable[BlockLike], endpoint: str = DEFAULT_ENDPOINT) -> ChecksumResult:
    """ Compute a checksum through the API. """
    data = _post(endpoint, "checksum", {"blocks": _binary(blocks)})
    steps = tuple(CalculationStep(**step) for step in data["steps"])
    return ChecksumResult(checksum=data["checksum"], steps=steps)


def remote_verify(sequence: Iterable[BlockLike], endpoint: str = DEFAULT_ENDPOINT) -> VerificationOutcome:
    """ Verify a received sequence through the API. """
    data = _post(endpoint, "verify", {"sequence": _binary(sequence)})
    return VerificationOutcome(
        is_valid=data["is_valid"],
        received_sum=data["received_sum"],
        message=data["message"],
    )


def remote_flip(
    sequence: Iterable[BlockLike],
    block_index: int,
    bit_index: int,
    endpoint: str = DEFAULT_ENDPOINT,
) -> Tuple[Block, ...]:
    payload = {"sequence": _binary(sequence), "block_index": block_index, "bit_index": bit_index}
    data = _post(endpoint, "flip", payload)
    return as_blocks(data["sequence"])
