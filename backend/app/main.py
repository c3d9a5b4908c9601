import logging
from typing import Optional

import numpy as np
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from solver import (
    DimensionError,
    InputError,
    random_grid,
    solve_system,
    validate_matrix,
    validation_report,
)
from solver.config import DEFAULT_DISPLAY_DIGITS, DEFAULT_EQUATIONS, DEFAULT_UNKNOWNS
from solver.logging_config import setup_logging

setup_logging()
logger = logging.getLogger("solver.api")

app = FastAPI(title="Gaussian Elimination API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MatrixRequest(BaseModel):
    matrix: list[list[str]]
    digits: int = Field(default=DEFAULT_DISPLAY_DIGITS, ge=0, le=12)


class RandomRequest(BaseModel):
    equations: int = DEFAULT_EQUATIONS
    unknowns: int = DEFAULT_UNKNOWNS
    seed: Optional[int] = None


class StepInfo(BaseModel):
    step_number: int
    description: str
    expression: str
    matrix: list[list[float]]


class VerificationInfo(BaseModel):
    step_number: int
    description: str
    expression: str
    explanation: str


class SolveResponse(BaseModel):
    equation: str
    given: dict
    method: dict
    steps: list[StepInfo]
    final_answer: str
    outcome: dict
    verification_steps: list[VerificationInfo]
    summary: dict


class CellError(BaseModel):
    row: int
    col: int
    raw: str
    reason: str


class ValidateResponse(BaseModel):
    ready: bool
    errors: list[CellError]


class RandomResponse(BaseModel):
    matrix: list[list[str]]


# Plain ``def`` endpoints run in FastAPI's worker thread pool, so a solve
# never blocks the event loop.

@app.post("/api/solve", response_model=SolveResponse)
def solve(req: MatrixRequest):
    try:
        return solve_system(req.matrix, digits=req.digits)
    except InputError as e:
        logger.warning("Rejected input: %s", e)
        raise HTTPException(status_code=400, detail={"message": f"Input Error: {e}", **e.to_dict()})
    except DimensionError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})
    except Exception as e:
        logger.exception("Solver failure")
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")


@app.post("/api/validate", response_model=ValidateResponse)
def validate(req: MatrixRequest):
    try:
        errors = validation_report(req.matrix)
    except DimensionError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})
    return {
        "ready": validate_matrix(req.matrix),
        "errors": [e.to_dict() for e in errors],
    }


@app.post("/api/random", response_model=RandomResponse)
def random_matrix(req: RandomRequest):
    rng = np.random.default_rng(req.seed)
    try:
        return {"matrix": random_grid(req.equations, req.unknowns, rng)}
    except DimensionError as e:
        raise HTTPException(status_code=400, detail={"message": str(e)})
