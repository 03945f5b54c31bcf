import logging
import os
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from algebra.engine import factor_expression, simplify_expression, solve_equation_trail
from linalg import MATRIX_OPERATIONS
from linalg.history import run_recorded
from linalg.matrix import Matrix
from linalg.systems import EquationSolver
from linalg.vector import Vector
from linalg.vectorset import compare_vector_sets
from logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(os.environ.get("EXACTSOLVER_LOG_LEVEL", "INFO"))
    yield


app = FastAPI(title="ExactSolver API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

MatrixInput = Union[list[list[Union[int, str]]], str]

# ── Request / response models ───────────────────────────────────────────

class ExpressionRequest(BaseModel):
    expression: str


class ExpressionResponse(BaseModel):
    expression: str
    result: str


class EquationRequest(BaseModel):
    equation: str


class StepInfo(BaseModel):
    description: str
    expression: str
    explanation: str


class SolveResponse(BaseModel):
    equation: str
    steps: list[StepInfo]
    final_answer: str
    verification_steps: list[StepInfo]


class MatrixRequest(BaseModel):
    matrix: MatrixInput
    steps: bool = False
    strategy: str = "first_row"


class MatrixStep(BaseModel):
    step_number: int
    kind: str
    description: str
    expression: str


class MatrixResponse(BaseModel):
    operation: str
    result: Union[list[list[str]], str]
    steps: list[MatrixStep]


class SystemRequest(BaseModel):
    a: MatrixInput
    b: Union[list[Union[int, str]], str]


class SystemResponse(BaseModel):
    solution_type: str
    coefficient_rank: int
    augmented_rank: int
    particular: Optional[list[str]]
    basis: list[list[str]]
    description: str


class VectorSetRequest(BaseModel):
    a: MatrixInput
    b: MatrixInput


class RepresentationInfo(BaseModel):
    representable: bool
    unique: bool
    coefficients: Optional[list[list[str]]]


class VectorSetResponse(BaseModel):
    a_represents_b: RepresentationInfo
    b_represents_a: RepresentationInfo
    equivalent: bool


def _to_matrix(value: MatrixInput) -> Matrix:
    return Matrix.parse(value) if isinstance(value, str) else Matrix.from_rows(value)


def _to_vector(value: Union[list[Union[int, str]], str]) -> Vector:
    return Vector.parse(value) if isinstance(value, str) else Vector(value)


def _run(label: str, func, *args):
    """Call *func*; user errors become 400, anything else 500."""
    try:
        return func(*args)
    except (ValueError, ZeroDivisionError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("%s failed", label)
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")


def _check_text(text: str, what: str) -> str:
    text = text.strip()
    if not text:
        raise HTTPException(status_code=400, detail=f"{what} cannot be empty.")
    return text


# ── Algebra ─────────────────────────────────────────────────────────────

@app.post("/api/simplify", response_model=ExpressionResponse)
def simplify(req: ExpressionRequest):
    expression = _check_text(req.expression, "Expression")
    return {"expression": expression, "result": _run("simplify", simplify_expression, expression)}


@app.post("/api/factor", response_model=ExpressionResponse)
def factor(req: ExpressionRequest):
    expression = _check_text(req.expression, "Expression")
    return {"expression": expression, "result": _run("factor", factor_expression, expression)}


@app.post("/api/solve", response_model=SolveResponse)
def solve(req: EquationRequest):
    equation = _check_text(req.equation, "Equation")
    return _run("solve", solve_equation_trail, equation)


# ── Linear algebra ──────────────────────────────────────────────────────

def _matrix_operation(operation: str, req: MatrixRequest) -> dict:
    func = MATRIX_OPERATIONS[operation]
    matrix = _to_matrix(req.matrix)
    kwargs = {"strategy": req.strategy} if operation == "det_expansion" else {}
    history = None
    if req.steps and hasattr(func, "history_type"):
        result, history = run_recorded(func, matrix, **kwargs)
    else:
        result = func(matrix, **kwargs)
    return {
        "operation": operation,
        "result": result.to_strings() if isinstance(result, Matrix) else str(result),
        "steps": history.to_dicts() if history is not None else [],
    }


@app.post("/api/matrix/{operation}", response_model=MatrixResponse)
def matrix_operation(operation: str, req: MatrixRequest):
    if operation not in MATRIX_OPERATIONS:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown matrix operation '{operation}'. "
                   f"Available: {', '.join(sorted(MATRIX_OPERATIONS))}.",
        )
    return _run(operation, _matrix_operation, operation, req)


def _solve_system(req: SystemRequest) -> dict:
    solution = EquationSolver.solve(_to_matrix(req.a), _to_vector(req.b))
    basis = solution.homogeneous
    return {
        "solution_type": solution.solution_type.value,
        "coefficient_rank": solution.info.coefficient_rank,
        "augmented_rank": solution.info.augmented_rank,
        "particular": [str(v) for v in solution.particular.column(0)]
        if solution.has_solution() else None,
        "basis": [[str(v) for v in basis.column(j)] for j in range(basis.cols)],
        "description": solution.description,
    }


@app.post("/api/system", response_model=SystemResponse)
def system(req: SystemRequest):
    return _run("system", _solve_system, req)


def _representation(rep) -> dict:
    return {
        "representable": rep.representable,
        "unique": rep.unique,
        "coefficients": rep.coefficients.to_strings() if rep.coefficients is not None else None,
    }


def _compare_sets(req: VectorSetRequest) -> dict:
    report = compare_vector_sets(_to_matrix(req.a), _to_matrix(req.b))
    return {
        "a_represents_b": _representation(report["a_represents_b"]),
        "b_represents_a": _representation(report["b_represents_a"]),
        "equivalent": report["equivalent"],
    }


@app.post("/api/vecset", response_model=VectorSetResponse)
def vecset(req: VectorSetRequest):
    return _run("vecset", _compare_sets, req)
